"""SQLAlchemy adapter storing the period lifecycle state."""

from sqlalchemy import text

from affiliate_ledger.application.ports.database import DatabaseEnginePort
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.models import ClosedPeriod, PeriodState
from affiliate_ledger.infrastructure.schema import (
    CLOSED_PERIODS_TABLE,
    PERIOD_STATE_TABLE,
)
from affiliate_ledger.infrastructure.serialization import (
    financials_from_json,
    financials_to_json,
    parse_timestamp,
)

SELECT_STATE_SQL = text(
    f"""
    SELECT active_period, viewing_period
    FROM {PERIOD_STATE_TABLE}
    WHERE workspace_id = :workspace_id
    """
)

SELECT_CLOSED_SQL = text(
    f"""
    SELECT period, closed_at, financials
    FROM {CLOSED_PERIODS_TABLE}
    WHERE workspace_id = :workspace_id
    ORDER BY closed_at, period
    """
)

DELETE_STATE_SQL = text(
    f"DELETE FROM {PERIOD_STATE_TABLE} WHERE workspace_id = :workspace_id"
)

INSERT_STATE_SQL = text(
    f"""
    INSERT INTO {PERIOD_STATE_TABLE} (
        workspace_id,
        active_period,
        viewing_period
    )
    VALUES (
        :workspace_id,
        :active_period,
        :viewing_period
    )
    """
)

INSERT_CLOSED_SQL = text(
    f"""
    INSERT INTO {CLOSED_PERIODS_TABLE} (
        workspace_id,
        period,
        closed_at,
        financials
    )
    VALUES (
        :workspace_id,
        :period,
        :closed_at,
        :financials
    )
    """
)


class SqlAlchemyPeriodRepository(PeriodRepositoryPort):
    """Period state of one workspace; closed periods are insert-only."""

    def __init__(self, db_port: DatabaseEnginePort, workspace_id: str) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            workspace_id: Workspace owning the state.
        """
        self._db_port = db_port
        self._workspace_id = workspace_id

    def load_state(self) -> PeriodState:
        params = {"workspace_id": self._workspace_id}
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            state_row = conn.execute(SELECT_STATE_SQL, params).first()
            closed_rows = conn.execute(SELECT_CLOSED_SQL, params).all()
        closed = tuple(
            ClosedPeriod(
                period=row.period,
                closed_at=parse_timestamp(row.closed_at),
                financials=financials_from_json(row.financials),
            )
            for row in closed_rows
        )
        return PeriodState(
            active_period=state_row.active_period if state_row else None,
            viewing_period=state_row.viewing_period if state_row else None,
            closed_periods=closed,
        )

    def save_state(self, state: PeriodState) -> None:
        """Persist the state in one transaction.

        Closed periods already stored are left untouched.
        """
        params = {"workspace_id": self._workspace_id}
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            existing = conn.execute(SELECT_CLOSED_SQL, params).all()
            stored = {row.period for row in existing}
            conn.execute(DELETE_STATE_SQL, params)
            conn.execute(
                INSERT_STATE_SQL,
                {
                    **params,
                    "active_period": state.active_period,
                    "viewing_period": state.viewing_period,
                },
            )
            new_rows = [
                {
                    **params,
                    "period": closed.period,
                    "closed_at": closed.closed_at.isoformat(),
                    "financials": financials_to_json(closed.financials),
                }
                for closed in state.closed_periods
                if closed.period not in stored
            ]
            if new_rows:
                conn.execute(INSERT_CLOSED_SQL, new_rows)


__all__ = ["SqlAlchemyPeriodRepository"]
