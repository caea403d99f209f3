"""
AWS Lambda handler for the Issuance Cost Engine API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging

from engine import CostProcessor, load_rate_tables
from engine.config import Settings

settings = Settings.from_env()

# Configure logging
logger = logging.getLogger()
logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

# Initialize processor (reused across warm invocations)
processor = CostProcessor(load_rate_tables(settings.rate_tables_path))

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

VARIABLE_FEE_PREFIX = "/variable_fee/"


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /calculate_costs
    - POST /variable_fee/<fee>
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path == "/calculate_costs" and http_method == "POST":
        return handle_calculation(event, processor.process_from_dict)
    elif path.startswith(VARIABLE_FEE_PREFIX) and http_method == "POST":
        fee = path[len(VARIABLE_FEE_PREFIX):]
        return handle_calculation(event, lambda data: processor.variable_fee_from_dict(fee, data))
    else:
        return _response(404, {"success": False, "error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": settings.environment})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Issuance Cost Calculator API",
            "version": "1.0",
            "environment": settings.environment,
            "runtime": "AWS Lambda",
            "endpoints": {
                "calculate_costs": "/calculate_costs [POST]",
                "variable_fee": "/variable_fee/<fee> [POST]",
                "health": "/health [GET]",
            },
        },
    )


def handle_calculation(event, calculate):
    """Parse the request body, run `calculate` on it and wrap the result."""
    try:
        # Parse request body
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return _response(400, {"success": False, "error": "No input data provided"})
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        if not isinstance(input_data, dict):
            return _response(400, {"success": False, "error": "Request body must be a JSON object"})

        categoria = input_data.get("categoria", input_data.get("category", "Unknown"))
        logger.info(f"Calculating costs for categoria: {categoria}")

        result = calculate(input_data)

        logger.info(f"Calculation finished for categoria: {categoria}")

        return _response(200, {"success": True, "data": result})

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"success": False, "error": f"Invalid JSON: {str(e)}"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"success": False, "error": f"Validation error: {str(e)}"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"success": False, "error": "An unexpected error occurred during processing"})
