from data_layer.repos.base_repo import BaseMongoRepository
from data_layer.repos.task_repo import TaskRepository
from data_layer.repos.journal_repo import JournalRepository
from data_layer.repos.focus_repo import FocusLogRepository, FocusSoundRepository
from data_layer.repos.habit_repo import HabitRepository
from data_layer.repos.user_repo import UserRepository


__all__ = [
    'BaseMongoRepository',
    'TaskRepository',
    'JournalRepository',
    'FocusLogRepository',
    'FocusSoundRepository',
    'HabitRepository',
    'UserRepository',
]
