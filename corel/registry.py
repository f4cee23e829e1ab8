'''
Registry

Maps string type tags to record types, so relations can name their related type before
that type is importable (e.g., two record types relating to each other). Tags are
registered explicitly with the ``register_record`` decorator; nothing is imported or
looked up by reflection.

.. code-block:: python

    @register_record
    class Permission(Record):
        table = permissions_table

    @register_record('role')
    class Role(Record):
        table = roles_table

    registry.resolve('Permission')  # -> Permission
    registry.resolve('role')        # -> Role
'''
import logging

from corel.record import Record
from corel.errors import TypeResolutionError


logger = logging.getLogger(__name__)


class Registry:
    def __init__(self):
        self.type_map: dict[str, type] = {}

    def register(self, record_type, tag: str | None = None):
        if tag is None:
            tag = record_type.__name__

        existing = self.type_map.get(tag)
        if existing is not None and existing is not record_type:
            logger.warning(
                f'Tag "{tag}" re-registered from {existing.__qualname__} to {record_type.__qualname__}'
            )

        self.type_map[tag] = record_type
        return record_type

    def unregister(self, tag: str):
        self.type_map.pop(tag, None)

    def __contains__(self, tag):
        return tag in self.type_map

    def resolve(self, related) -> type:
        '''
        Resolve a record type from either a tag or the type itself.

        Raises:
            TypeResolutionError: if ``related`` is an unregistered tag, or anything other
                                 than a Record subtype
        '''
        if isinstance(related, str):
            record_type = self.type_map.get(related)
            if record_type is None:
                raise TypeResolutionError(f'No record type registered under "{related}"')
        else:
            record_type = related

        if not (isinstance(record_type, type) and issubclass(record_type, Record)):
            raise TypeResolutionError(f'{related!r} is not a Record type')

        return record_type

    def new_instance(self, related):
        '''
        Construct a default (attribute-less) instance of the resolved record type.
        '''
        record_type = self.resolve(related)

        try:
            return record_type()
        except Exception as e:
            raise TypeResolutionError(
                f'Record type {record_type.__qualname__} could not be instantiated: {e}'
            ) from e


registry = Registry()

def register_record(tag=None):
    '''
    Registry decorator for record types. Can be used bare (``@register_record``), in
    which case the class name is the tag, or with an explicit tag.
    '''
    if isinstance(tag, type):
        return registry.register(tag)

    def decorator(cls):
        return registry.register(cls, tag)

    return decorator
