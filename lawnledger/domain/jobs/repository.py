"""Job repository - Database operations for jobs"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Job


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_jobs(db: Session) -> list[Job]:
        """Get all jobs ordered by date, then insertion order"""
        return db.query(Job).order_by(Job.date, Job.id).all()

    @staticmethod
    def get_job_by_id(db: Session, job_id: int) -> Optional[Job]:
        return db.query(Job).filter(Job.id == job_id).first()

    @staticmethod
    def create_job(db: Session, **job_data) -> Job:
        job = Job(**job_data)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def replace_job(db: Session, job: Job, **fields) -> Job:
        """Overwrite every given field, including explicit None values"""
        for key, value in fields.items():
            if hasattr(job, key):
                setattr(job, key, value)

        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def delete_job(db: Session, job: Job) -> None:
        db.delete(job)
        db.commit()
