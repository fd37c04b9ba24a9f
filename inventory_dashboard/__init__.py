from flask import Flask, jsonify
from inventory_dashboard.config import Config
from inventory_dashboard.errors import register_error_handlers
from inventory_dashboard.extensions import db, migrate, mail


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    register_error_handlers(app)

    from inventory_dashboard.controllers.auth_controller import auth_bp
    from inventory_dashboard.controllers.item_controller import item_bp
    from inventory_dashboard.controllers.borrow_controller import borrow_bp
    from inventory_dashboard.controllers.return_controller import return_bp
    from inventory_dashboard.controllers.transaction_controller import transaction_bp
    from inventory_dashboard.controllers.sanction_controller import sanction_bp
    from inventory_dashboard.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(item_bp)
    app.register_blueprint(borrow_bp)
    app.register_blueprint(return_bp)
    app.register_blueprint(transaction_bp)
    app.register_blueprint(sanction_bp)
    app.register_blueprint(notif_bp)

    # local ledger tables (sanction resolutions, notification logs)
    from inventory_dashboard.models import notification_log, sanction_resolution  # noqa: F401
    with app.app_context():
        db.create_all()

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    from inventory_dashboard.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
