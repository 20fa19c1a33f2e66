"""enrolctl — cohort-scoped enrollment identifier allocation."""

__version__ = "0.1.0"
