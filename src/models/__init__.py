from src.models.statistic import Statistic
