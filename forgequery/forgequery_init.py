import logging
import os
import sys
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from .request import ForgeQueryRequest
from .errors import JsonapiError
import flask.app


class ForgeQuery:
    """This class configures the Flask application to serve forgequery resources
    :param app: a Flask application.
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    """

    # Configuration settings are stored as class variables
    DEFAULT_PAGE_SIZE = 12
    MAX_PAGE_SIZE = 50
    SEARCH_LIMIT = 1000
    LOGLEVEL = logging.WARNING
    #
    config = {}

    def __init__(self, app: flask.app.Flask = None, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, **kwargs)

    def init_app(self, app: flask.app.Flask, **kwargs) -> None:
        """
        Extension initialization:
        - bind the models DB to the app
        - install the request class that parses the query arguments
        - register the error handler for the query errors
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if "sqlalchemy" not in app.extensions:
            DB.init_app(app)
        self.db = DB

        app.request_class = ForgeQueryRequest

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        for conf_name, conf_val in kwargs.items():
            setattr(ForgeQuery, conf_name, conf_val)

        app.register_error_handler(JsonapiError, handle_jsonapi_error)

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stdout so we redirect eveything to sys.stderr
        """
        log = logging.getLogger(__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


def handle_jsonapi_error(exc: JsonapiError):
    """
    Format the query errors, for example:
    {
         "title": "Validation Error: Invalid filter(s): color. Valid filters are: id, name",
         "detail": "Validation Error: Invalid filter(s): color. Valid filters are: id, name",
         "code": "400"
    }
    """
    error = {"title": exc.message, "detail": exc.message, "code": str(exc.status_code)}
    return jsonify(errors=[error]), exc.status_code


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = ForgeQuery.init_logging(LOGLEVEL)
