# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions will be caught by the error handler registered in ForgeQuery.init_app and formatted, for example:
# {
#      "title": "Validation Error: Invalid sort parameter(s): -color. Valid sorts are: id, name",
#      "detail": "Validation Error: Invalid sort parameter(s): -color. Valid sorts are: id, name",
#      "code": "400"
# }
#
import traceback
from werkzeug.exceptions import NotFound
import forgequery
from sqlalchemy.exc import DontWrapMixin
from http import HTTPStatus
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class JsonapiError(Exception, DontWrapMixin):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def __str__(self):
        return self.message


class NotFoundError(JsonapiError, NotFound):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "NotFoundError "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        """
        JsonapiError.__init__(self)
        self.status_code = status_code
        forgequery.log.info("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class GenericError(JsonapiError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Generic Error: "

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        Exception.__init__(self)
        self.status_code = status_code
        forgequery.log.error("Generic Error: %s", message)
        if is_debug():
            forgequery.log.debug(traceback.format_exc(120))
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class ValidationError(JsonapiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value):
        Exception.__init__(self)
        self.status_code = status_code
        forgequery.log.warning("ValidationError: %s", message)
        self.message += message


class InvalidQuery(ValidationError):
    """
    This exception is raised when a filter, include, field or sort is not whitelisted for the resource.
    The message names the offending values and the valid alternatives.
    """
