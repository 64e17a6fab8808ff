import logging
from pathlib import Path

from flask import Flask, jsonify, send_from_directory

from quiz_bank.config import LOG_LEVEL, PUBLIC_DIR, QUESTION_SETS_ENDPOINT, SERVER_HOST, SERVER_PORT
from quiz_bank.question_sets import list_question_sets, manifest_data

logger = logging.getLogger(__name__)


def create_app(public_dir=PUBLIC_DIR) -> Flask:
    """Serve the question set listing and the JSON files it points to."""
    public = Path(public_dir).resolve()
    app = Flask(__name__)

    @app.route(QUESTION_SETS_ENDPOINT)
    def question_sets():
        try:
            sets = list_question_sets(public, newest_first=True)
        except Exception as e:
            logger.exception("Listing question sets in %s failed", public)
            return jsonify({"error": str(e)}), 500
        return jsonify(manifest_data(sets))

    @app.route("/<path:filename>")
    def public_file(filename):
        return send_from_directory(public, filename)

    return app


def main():
    logging.basicConfig(level=LOG_LEVEL)
    app = create_app()
    logger.info("Serving question sets from %s", Path(PUBLIC_DIR).resolve())
    app.run(host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    main()
