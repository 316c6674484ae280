from urllib.parse import parse_qs, urlsplit

from songlist.services.errors import InvalidLink


def extract_query_param(url: str, param_name: str) -> str:
    """
    Read a query parameter from a URL.

    Share pages sometimes carry their parameters after the ``#``, so the
    fragment is searched when the query string does not have the parameter.

    Raises:
        InvalidLink: If the parameter is missing or empty
    """
    parts = urlsplit(url)
    fragment_query = parts.fragment.split("?", 1)[-1]
    for query in (parts.query, fragment_query):
        values = parse_qs(query).get(param_name)
        if values and values[0]:
            return values[0]
    raise InvalidLink(f"Missing '{param_name}' parameter in link")
