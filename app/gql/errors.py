import logging

from graphql import GraphQLError

from app.errors import FeedError

logger = logging.getLogger(__name__)


def format_error(error: GraphQLError) -> dict:
    # extensions.status (422 는 extensions.data 도) 를 붙인 GraphQL 오류
    formatted = error.formatted
    original = error.original_error
    extensions = dict(formatted.get("extensions") or {})

    if isinstance(original, FeedError):
        formatted["message"] = original.message
        extensions["status"] = original.status_code
        if original.data:
            extensions["data"] = original.data
    elif original is not None:
        logger.error("GraphQL resolver failed: %s", original, exc_info=original)
        formatted["message"] = "An internal error occurred."
        extensions["status"] = 500
    else:
        # 문법 오류, 스키마 검증 오류
        extensions["status"] = 400

    formatted["extensions"] = extensions
    return formatted
