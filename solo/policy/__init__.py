from .registry import PolicyRegistry, UniquenessPolicy, job_type_name, unique_job

__all__ = ["PolicyRegistry", "UniquenessPolicy", "job_type_name", "unique_job"]
