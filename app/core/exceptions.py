class DataError(Exception):
    code = "DATA_ERROR"
    message = "Data access failed"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

class FilterValidationError(DataError):
    code = "VALIDATION_ERROR"
    message = "The filter parameters are invalid"

class RecordNotFoundError(DataError):
    code = "NOT_FOUND"
    message = "The requested resource could not be found"

class EditConflictError(DataError):
    code = "EDIT_CONFLICT"
    message = "Unable to update the record due to an edit conflict, please try again"

class StorageError(DataError):
    code = "STORAGE_ERROR"
    message = "The server encountered a problem and could not process your request"

class QueryTimeoutError(StorageError):
    code = "QUERY_TIMEOUT"
    message = "The query took too long and was cancelled"

class MappingError(DataError):
    code = "MAPPING_ERROR"
    message = "A result row did not match the expected shape"
