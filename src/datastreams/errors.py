class DataStreamsError(Exception): ...


# schema construction


class SchemaError(DataStreamsError, ValueError): ...


class SchemaMismatchError(SchemaError):
    '''
    Header and type sequences of a schema differ in length.

    '''


class DuplicateColumnError(SchemaError): ...


# table access


class ColumnIndexError(DataStreamsError, IndexError):
    def __init__(self, index: int, cols: int) -> None:
        self.index = index
        self.cols = cols
        super().__init__(
            f'column index {index} out of range, table has {cols} columns'
        )


class ColumnTypeError(DataStreamsError, TypeError): ...


class UnsupportedOperationError(DataStreamsError, NotImplementedError): ...


# source / sink state machine


class StreamStateError(DataStreamsError, RuntimeError): ...


class SourceExhaustedError(StreamStateError):
    '''
    Read attempted on a source in the DONE state, `reset()` it first.

    '''


class SinkClosedError(StreamStateError): ...


class IncompleteStreamError(StreamStateError):
    '''
    A stream handler returned before its source reached DONE.

    '''


class NoStreamHandlerError(DataStreamsError, LookupError): ...
