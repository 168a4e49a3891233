"""SQLite-backed audit log of gate decisions and executions."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import aiosqlite

from opsgate.audit.migrations import TABLES
from opsgate.audit.models import DecisionRecord, ExecutionRecord, ViolationRecord
from opsgate.models.decision import ExecutionDecision, ExecutionResult


class AuditStore:
    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self.db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self.db_path)
        for table_sql in TABLES:
            await self._db.execute(table_sql)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    def _get_db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("AuditStore not initialized — call initialize() first")
        return self._db

    async def log_decision(
        self, decision: ExecutionDecision, username: Optional[str] = None
    ) -> DecisionRecord:
        db = self._get_db()
        report = decision.report
        record = DecisionRecord(
            skill_name=decision.skill_name,
            environment=decision.environment,
            username=username or "",
            state=decision.state.value,
            risk_level=int(report.risk_level) if report else None,
            blast_radius=report.blast_radius if report else 0,
            reason=decision.reason,
            command=decision.interpolated_command,
        )
        await db.execute(
            "INSERT INTO decisions (id, skill_name, environment, username, state, "
            "risk_level, blast_radius, reason, command, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.id,
                record.skill_name,
                record.environment,
                record.username,
                record.state,
                record.risk_level,
                record.blast_radius,
                record.reason,
                record.command,
                record.created_at.isoformat(),
            ),
        )

        result = decision.policy_result
        rows = [(v, True) for v in result.violations] + [(v, False) for v in result.warnings]
        for violation, blocking in rows:
            await db.execute(
                "INSERT INTO violations (decision_id, policy_name, severity, enforcement, blocking, reason) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    record.id,
                    violation.policy_name,
                    violation.severity.value,
                    violation.enforcement.value,
                    int(blocking),
                    violation.reason,
                ),
            )
        await db.commit()
        return record

    async def log_execution(self, decision_id: str, result: ExecutionResult) -> ExecutionRecord:
        db = self._get_db()
        record = ExecutionRecord(
            decision_id=decision_id,
            status=result.status.value,
            exit_code=result.exit_code,
            output=result.stdout or result.message,
            error=result.stderr,
            duration=result.duration,
            executed_at=result.timestamp,
        )
        await db.execute(
            "INSERT INTO executions (id, decision_id, status, exit_code, output, error, duration, executed_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.id,
                record.decision_id,
                record.status,
                record.exit_code,
                record.output,
                record.error,
                record.duration,
                record.executed_at.isoformat(),
            ),
        )
        await db.commit()
        return record

    async def get_decision(self, decision_id: str) -> DecisionRecord | None:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT id, skill_name, environment, username, state, risk_level, "
            "blast_radius, reason, command, created_at FROM decisions WHERE id = ?",
            (decision_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return DecisionRecord(
            id=row[0],
            skill_name=row[1],
            environment=row[2],
            username=row[3],
            state=row[4],
            risk_level=row[5],
            blast_radius=row[6],
            reason=row[7],
            command=row[8],
            created_at=row[9],
        )

    async def get_violations(self, decision_id: str) -> list[ViolationRecord]:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT decision_id, policy_name, severity, enforcement, blocking, reason "
            "FROM violations WHERE decision_id = ? ORDER BY id",
            (decision_id,),
        )
        rows = await cursor.fetchall()
        return [
            ViolationRecord(
                decision_id=r[0],
                policy_name=r[1],
                severity=r[2],
                enforcement=r[3],
                blocking=bool(r[4]),
                reason=r[5],
            )
            for r in rows
        ]

    async def get_execution(self, decision_id: str) -> ExecutionRecord | None:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT id, decision_id, status, exit_code, output, error, duration, executed_at "
            "FROM executions WHERE decision_id = ?",
            (decision_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return ExecutionRecord(
            id=row[0],
            decision_id=row[1],
            status=row[2],
            exit_code=row[3],
            output=row[4],
            error=row[5],
            duration=row[6],
            executed_at=row[7],
        )

    async def get_history(self, limit: int = 20) -> list[dict]:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT d.id, d.skill_name, d.environment, d.username, d.state, d.risk_level, "
            "       d.reason, d.created_at, e.status "
            "FROM decisions d LEFT JOIN executions e ON e.decision_id = d.id "
            "ORDER BY d.created_at DESC LIMIT ?",
            (limit,),
        )
        rows = await cursor.fetchall()
        results: list[dict] = []
        for r in rows:
            results.append(
                {
                    "decision_id": r[0],
                    "skill_name": r[1],
                    "environment": r[2],
                    "username": r[3],
                    "state": r[4],
                    "risk_level": r[5],
                    "reason": r[6],
                    "created_at": r[7],
                    "execution_status": r[8],
                }
            )
        return results
