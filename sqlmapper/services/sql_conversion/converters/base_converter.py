from sqlmapper.utils.logger import setup_logger
from ..dialects import DialectDescriptor, get_descriptor
from ..utils.sql_splitter import SplitterOptions


class BaseConverter:
    """
    A base class for dialect parsers and generators to ensure a consistent interface.

    Instances hold immutable configuration only (the dialect descriptor and
    whatever lookup tables a subclass loads at construction). Everything a
    single parse or generate call produces lives in that call's locals, so
    one instance may serve many threads at once.
    """
    def __init__(self, descriptor: DialectDescriptor | str):
        if isinstance(descriptor, str):
            descriptor = get_descriptor(descriptor)
        self.descriptor = descriptor
        self.dialect = descriptor.name
        self.options = SplitterOptions.for_dialect(descriptor)
        self.logger = setup_logger(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect!r})"
