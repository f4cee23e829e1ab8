from typing import Any
from collections.abc import Callable, Sequence


# (relation) -> None
BaseConstraint  = Callable[[Any], None]
# (relation, parents) -> None
EagerConstraint = Callable[[Any, Sequence[Any]], None]
# (parents, results, relation_name, relation) -> parents
EagerMatcher    = Callable[[Sequence[Any], Sequence[Any], str, Any], Sequence[Any]]
