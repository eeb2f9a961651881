"""Helpers for API Gateway proxy events (REST v1 and HTTP v2 payloads)."""

from http import HTTPStatus


def request_path(event):
    path = event.get("rawPath") or event.get("path") or "/"
    return path.rstrip("/") or "/"


def query_params(event):
    return event.get("queryStringParameters") or {}


def raw_query(event):
    if event.get("rawQueryString") is not None:
        return event["rawQueryString"]
    return "&".join(f"{k}={v}" for k, v in query_params(event).items())


def redirect(location):
    return {
        "statusCode": HTTPStatus.SEE_OTHER.value,
        "headers": {
            "Location": location,
            "Access-Control-Allow-Origin": "*",
        },
    }
