class CorelError(Exception):
    pass


class TypeResolutionError(CorelError, TypeError):
    '''
    Related type could not be resolved to a record type able to produce a query.
    '''


class QueryExecutionError(CorelError):
    '''
    Statement failed in the storage layer. The original SQLAlchemy error is chained as
    ``__cause__``.
    '''
    def __init__(self, message, statement=None):
        super().__init__(message)
        self.statement = statement


class RelationNotFoundError(CorelError, AttributeError):
    pass


class MatcherContractViolation(CorelError):
    '''
    Eager matcher returned a batch that doesn't cover every parent it was given.
    '''
