# /exam-portal/app/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that `Base.metadata` knows about every
# table before `create_all` runs at startup (and in the test fixtures).

from .base_class import Base

from .models.user_model import User, PaperAssignment, SubmissionStatus
from .models.question_models import Question, Passage, Upload
from .models.result_models import Response, Grade
from .models.config_models import ConfigEntry
