from corel.util import db
from corel.util import types
