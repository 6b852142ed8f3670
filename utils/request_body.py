from flask import request


def json_body():
    """The request's JSON object; {} when there is no JSON body, None when the body is not an object"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None
