"""HTTP routers mounted by :mod:`streamverse_api.main`."""
