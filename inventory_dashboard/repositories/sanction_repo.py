from sqlalchemy.exc import IntegrityError

from inventory_dashboard.errors import ConflictError
from inventory_dashboard.extensions import db
from inventory_dashboard.models.sanction_resolution import SanctionResolution


class SanctionRepo:
    @staticmethod
    def resolved_ids() -> set[str]:
        return {row.transaction_id for row in SanctionResolution.query.all()}

    @staticmethod
    def list_all():
        return SanctionResolution.query.order_by(SanctionResolution.resolved_at.desc()).all()

    @staticmethod
    def create(resolution: SanctionResolution):
        db.session.add(resolution)
        try:
            db.session.commit()
        except IntegrityError:
            # transaction_id is unique; a concurrent resolve got there first
            db.session.rollback()
            raise ConflictError("Sanction is already resolved", transaction_id=resolution.transaction_id)
        return resolution
