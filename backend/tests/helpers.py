from __future__ import annotations

import json

import pytest


def logged_events(caplog: pytest.LogCaptureFixture, event: str) -> list[dict]:
    events = []
    for record in caplog.records:
        if record.name != "coldstart":
            continue
        payload = json.loads(record.getMessage())
        if payload.get("event") == event:
            events.append(payload)
    return events


def api_gateway_event(path: str = "/health", method: str = "GET") -> dict:
    headers = {
        "host": "abc123.execute-api.us-east-1.amazonaws.com",
        "x-forwarded-port": "443",
        "x-forwarded-proto": "https",
    }
    return {
        "resource": "/{proxy+}",
        "path": path,
        "httpMethod": method,
        "headers": headers,
        "multiValueHeaders": {key: [value] for key, value in headers.items()},
        "queryStringParameters": None,
        "multiValueQueryStringParameters": None,
        "pathParameters": {"proxy": path.lstrip("/")},
        "stageVariables": None,
        "requestContext": {
            "resourcePath": "/{proxy+}",
            "httpMethod": method,
            "path": path,
            "stage": "test",
            "requestId": "req-123",
            "identity": {"sourceIp": "127.0.0.1"},
        },
        "body": None,
        "isBase64Encoded": False,
    }


FASTAPI_APP_SOURCE = """
from fastapi import FastAPI

app = FastAPI()


@app.get("/health")
async def health():
    return {"status": "ok"}
"""
