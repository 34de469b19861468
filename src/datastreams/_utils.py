'''
Misc internal utilities

'''
import os


class DataStreamsWarning(Warning): ...


default_loglevel: str = 'info'


def get_loglevel() -> str:
    return os.getenv('DATASTREAMS_LOGLEVEL', default_loglevel)


def synth_header(cols: int) -> tuple[str, ...]:
    '''
    Default column names used when a header is not provided.

    '''
    return tuple(f'Column{i}' for i in range(1, cols + 1))
