from .staff_member import StaffMember
from .task import Task
from .project import Project
from .development_project import DevelopmentProject
from .contract import Contract
from .budget_entry import BudgetEntry
from .cloud_backup import CloudBackup

# додай тут всі свої моделі!
