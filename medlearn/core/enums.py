from enum import Enum


class ExerciseType(str, Enum):
    MULTIPLE_CHOICE = 'multipla_escolha'
    TRUE_FALSE = 'verdadeiro_falso'
    ESSAY = 'dissertativo'
    MIXED = 'misto'


class UserRole(str, Enum):
    VISITOR = 'Visitante'
    STUDENT = 'Aluno'
    INSTRUCTOR = 'Instrutor'
    ADMIN = 'Administrador'


class ScoreBand(str, Enum):
    EXCELLENT = 'excellent'
    GOOD = 'good'
    RETRY = 'retry'


class CompletionFilter(str, Enum):
    ALL = 'all'
    PENDING = 'pending'
    COMPLETED = 'completed'
