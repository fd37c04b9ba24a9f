from datetime import datetime
from inventory_dashboard.extensions import db


class SanctionResolution(db.Model):
    __tablename__ = "sanction_resolutions"

    id = db.Column(db.Integer, primary_key=True)

    # transaction ids are owned by the backend
    transaction_id = db.Column(db.String(64), unique=True, nullable=False, index=True)

    resolved_by = db.Column(db.String(64), nullable=True)
    note = db.Column(db.String(500), nullable=True)

    # backend acknowledged the resolution
    forwarded = db.Column(db.Boolean, nullable=False, default=False)

    resolved_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
