from flask import Flask, request, jsonify
from flask_cors import CORS
from engine import CostProcessor, load_rate_tables
from engine.config import Settings
import logging

settings = Settings.from_env()

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the proposal front-end calls the API from another origin)
CORS(app)

# Initialize the cost processor with the configured catalogs
processor = CostProcessor(load_rate_tables(settings.rate_tables_path))


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Issuance Cost Calculator API",
        "version": "1.0",
        "environment": settings.environment,
        "endpoints": {
            "calculate_costs": "/calculate_costs [POST]",
            "variable_fee": "/variable_fee/<custody|registration|cvm_fee|market_association> [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _read_body():
    input_data = request.get_json(force=True, silent=True)
    if not input_data or not isinstance(input_data, dict):
        return None
    return input_data


@app.route("/calculate_costs", methods=["POST"])
def calculate_costs():
    """
    Price an issuance: catalog fees, variable fees and totals
    """
    try:
        input_data = _read_body()

        if input_data is None:
            return jsonify({
                "success": False,
                "error": "No input data provided"
            }), 400

        categoria = input_data.get("categoria", input_data.get("category", "Unknown"))
        logger.info(f"Calculating costs for categoria: {categoria}")

        result = processor.process_from_dict(input_data)

        logger.info(f"Costs calculated: {len(result['custos'])} items, table {result['tabela_origem']}")

        return jsonify({"success": True, "data": result}), 200

    except ValueError as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 400

    except Exception as e:
        # Unexpected errors - details stay in the logs
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "success": False,
            "error": "An unexpected error occurred during calculation"
        }), 500


@app.route("/variable_fee/<fee>", methods=["POST"])
def variable_fee(fee):
    """Calculate one market-infrastructure fee on its own"""
    try:
        input_data = _read_body()

        if input_data is None:
            return jsonify({
                "success": False,
                "error": "No input data provided"
            }), 400

        logger.info(f"Calculating variable fee {fee}")

        result = processor.variable_fee_from_dict(fee, input_data)

        return jsonify({"success": True, "data": result}), 200

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 400

    except Exception as e:
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "success": False,
            "error": "An unexpected error occurred during calculation"
        }), 500


@app.route("/custos_por_combinacao", methods=["POST"])
def calculate_costs_legacy():
    """Legacy endpoint - redirects to /calculate_costs"""
    return calculate_costs()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port, debug=False)
