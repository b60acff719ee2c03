"""
Entity records handed between the repositories and the HTTP layer.

id, created_at and version are owned by storage: they are None on a record
that has not been inserted yet and are filled in from the RETURNING clause.
"""


def normalize_text(value, required=True):
    if value is None:
        if required:
            raise ValueError("missing required text field")
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {type(value).__name__}")
    value = " ".join(value.split())
    if required and not value:
        raise ValueError("text field must not be blank")
    return value

def normalize_int(value):
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    return value

def normalize_list(values):
    """
    Strip every item and drop duplicates, keeping the first occurrence.
    """
    if values is None:
        return []

    if not isinstance(values, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {type(values).__name__}")

    cleaned = []
    for item in values:
        if not isinstance(item, str):
            raise ValueError("found a non-string item in a list of strings")
        item = item.strip()
        if item:
            cleaned.append(item)

    return list(dict.fromkeys(cleaned))


class Record:
    fields: tuple = ()

    def to_dict(self):
        data = {}
        for field in self.fields:
            value = getattr(self, field)
            data[field] = value[:] if isinstance(value, list) else value
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(**{field: data.get(field) for field in cls.fields})

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id!r}, version={self.version!r})"


class Movie(Record):
    fields = ("id", "created_at", "title", "year", "runtime", "genres", "version")

    def __init__(self, title, year, runtime, genres=None, id=None, created_at=None, version=None):
        self.id = id
        self.created_at = created_at
        self.title = normalize_text(title)
        self.year = normalize_int(year)
        self.runtime = normalize_int(runtime)
        self.genres = normalize_list(genres)
        self.version = version


class Actor(Record):
    fields = ("id", "created_at", "fullname", "year", "films", "girlfriend", "version")

    def __init__(self, fullname, year, films=None, girlfriend=None, id=None, created_at=None, version=None):
        self.id = id
        self.created_at = created_at
        self.fullname = normalize_text(fullname)
        self.year = normalize_int(year)
        self.films = normalize_list(films)
        self.girlfriend = normalize_text(girlfriend, required=False)
        self.version = version


class Director(Record):
    fields = ("id", "created_at", "name", "surname", "awards", "version")

    def __init__(self, name, surname, awards=None, id=None, created_at=None, version=None):
        self.id = id
        self.created_at = created_at
        self.name = normalize_text(name)
        self.surname = normalize_text(surname)
        self.awards = normalize_list(awards)
        self.version = version
