"""HTTP surface for the almanac (FastAPI)."""

from spring_almanac.web.app import create_app


__all__ = ["create_app"]
