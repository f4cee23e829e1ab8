from corel.relations.base import Relation
from corel.relations.custom import CustomRelation
