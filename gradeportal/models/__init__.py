# Import every model so Base.metadata knows all tables
from gradeportal.models.question import Question  # noqa
from gradeportal.models.evaluation import Evaluation  # noqa
