# geoquery/routes/__init__.py
from geoquery.routes.geoquery import create_geoquery_blueprint

__all__ = ["create_geoquery_blueprint"]
