from daycare.models.activity_plan_model import ActivityPlanModel
from daycare.models.child_model import ChildModel
from daycare.models.childcare_log_model import ChildcareLogModel
from daycare.models.class_model import ClassModel
from daycare.models.client_state_model import ClientStateModel
from daycare.models.daily_child_observation_model import DailyChildObservationModel
from daycare.models.development_evaluation_model import DevelopmentEvaluationModel
from daycare.models.observation_log_model import ObservationLogModel
from daycare.models.observation_model import ObservationModel

__all__ = [
    "ActivityPlanModel",
    "ChildModel",
    "ChildcareLogModel",
    "ClassModel",
    "ClientStateModel",
    "DailyChildObservationModel",
    "DevelopmentEvaluationModel",
    "ObservationLogModel",
    "ObservationModel",
]
