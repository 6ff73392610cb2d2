"""Job catalogue and job assignment."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.errors import InvalidAmount, JobNotFound
from rpeconomy.interfaces import IAccountLedger
from rpeconomy.models import Job, Player

logger = logging.getLogger(__name__)


class JobService:
    """Service creating jobs and assigning them to players."""

    def __init__(self, session: Session, ledger: IAccountLedger):
        self.session = session
        self.ledger = ledger

    def create_job(self, name: str, salary: int) -> Job:
        """Create a job paying ``salary`` per payroll run.

        Raises:
            InvalidAmount: If salary is not a non-negative whole number
        """
        if not isinstance(salary, int) or isinstance(salary, bool) or salary < 0:
            raise InvalidAmount("Salary must be a non-negative whole number")
        with atomic(self.session):
            job = Job(name=name, salary=salary)
            self.session.add(job)
            self.session.flush()
        logger.info("created job %s '%s' paying %s", job.id, name, salary)
        return job

    def get_job(self, job_id: int) -> Job:
        with storage_errors():
            job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFound()
        return job

    def list_jobs(self) -> list[Job]:
        with storage_errors():
            return list(self.session.execute(select(Job).order_by(Job.id)).scalars())

    def assign_job(self, player_id: str, job_id: int) -> Player:
        """Assign an existing job to a player.

        Raises:
            PlayerNotFound: If the player does not exist
            JobNotFound: If the job does not exist
        """
        with atomic(self.session):
            player = self.ledger.get_player(player_id, lock=True)
            job = self.get_job(job_id)
            player.job_id = job.id
        logger.info("assigned job %s to player %s", job_id, player_id)
        return player
