import logging

import click
from flask import Flask, jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from config import ensure_indexes, get_log_level, get_secret_key
from model import index_specs
from jagacuan.api import auth, budgets, categories, challenges, dashboard, education, goals, reports, spending, transactions
from jagacuan.currency import format_rupiah, format_rupiah_short
from jagacuan.errors import ValidationError
from jagacuan.repositories.budgets import BudgetRepository


logger = logging.getLogger(__name__)

BLUEPRINTS = (
    (auth.bp, "/api/auth"),
    (categories.bp, "/api/categories"),
    (budgets.bp, "/api/budgets"),
    (spending.bp, "/api/spending"),
    (goals.bp, "/api/goals"),
    (transactions.bp, "/api/transactions"),
    (challenges.bp, "/api/challenges"),
    (education.bp, "/api/education"),
    (dashboard.bp, "/api/dashboard"),
    (reports.bp, "/api/reports"),
)


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify(error.to_dict()), 400

    @app.errorhandler(PyMongoError)
    def handle_database_error(error):
        logger.exception("[APP] database error: %s", error)
        return jsonify({"error": "Database error, please try again"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description}), error.code


def register_cli(app):
    @app.cli.command("reconcile-budgets")
    @click.option("--user-id", default=None, help="Only reconcile budgets of this user")
    def reconcile_budgets(user_id):
        """Recompute budgeting.spent from spending rows and repair drift"""
        corrected = BudgetRepository().reconcile_all(user_id)
        for row in corrected:
            click.echo(f"{row['budget_id']}: {row['previous_spent']} -> {row['new_spent']}")
        click.echo(f"{len(corrected)} budget(s) corrected")

    @app.cli.command("init-indexes")
    def init_indexes():
        """Create the MongoDB indexes listed in model.index_specs"""
        ensure_indexes(index_specs)
        click.echo("Indexes created")


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.update(SECRET_KEY=get_secret_key())
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Custom Jinja filters
    app.add_template_filter(format_rupiah, "currency")
    app.add_template_filter(format_rupiah_short, "currency_short")

    for blueprint, prefix in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=prefix)

    register_error_handlers(app)
    register_cli(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    app = create_app()
    logger.info("Starting JagaCuan API on http://localhost:5006")
    app.run(debug=True, host="0.0.0.0", port=5006)
