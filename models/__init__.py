from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from models.goal import Goal, GoalCategory
from models.holding import Holding
from models.target import TargetAllocation
from models.sip import Sip
from models.rebalance import RebalanceExecution
