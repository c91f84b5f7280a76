"""Models package."""

from .user import User
from .job import Job
from .candidate import Candidate
from .application import Application
from .transaction import Transaction
