__version__ = "1.0.0"

import logging

from .modify import Edit, QueryEdit, modifyUrlQuery, modify_url_query
from .parse import ParsedUrl, parseUrl, parse_url
from .query import Query, QueryValue, decode_component, encode_component, parseQueryString, parseSearch, parse_search, stringifySearch, stringify_search

# Debug events stay silent unless the host application configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
