import pytest
import json
import logging
import tempfile
import os
from ingestion.ingest import load_json_file, ingest_one, ingest_many, load_into, save_jsonl
from models.records import Movie, Director
from storage.filters import Filters

# -------------------------------
# Sample movie dicts
# -------------------------------
valid_movie = {
    "id": 77,
    "title": "Inception",
    "year": "2010",
    "runtime": 148,
    "genres": ["Action", "Sci-Fi"],
    "version": 9,
}

invalid_movie_missing_title = {
    "year": 2020,
    "runtime": 100,
    "genres": ["Drama"],
}

invalid_movie_unknown_field = {
    "title": "Heat",
    "year": 1995,
    "runtime": 170,
    "rating": 8.3,
}

invalid_movie_wrong_type = "This is not a dict"

# -------------------------------
# load_json_file tests
# -------------------------------

def test_load_json_file_array():
    with tempfile.NamedTemporaryFile(mode="w+", delete=False) as f:
        json.dump([valid_movie, valid_movie], f)
        path = f.name

    try:
        data = list(load_json_file(path))
        assert all(isinstance(d, dict) for d in data)
        assert len(data) == 2
    finally:
        os.remove(path)

def test_load_json_file_jsonl():
    with tempfile.NamedTemporaryFile(mode="w+", delete=False) as f:
        for _ in range(2):
            f.write(json.dumps(valid_movie) + "\n")
        path = f.name

    try:
        data = list(load_json_file(path))
        assert len(data) == 2
    finally:
        os.remove(path)

def test_load_json_file_invalid_json(caplog):
    with tempfile.NamedTemporaryFile(mode="w+", delete=False) as f:
        f.write('{"title": "Good"}\n')
        f.write('INVALID_JSON\n')
        f.write('\n')
        f.write('[1, 2]\n')
        path = f.name

    try:
        data = list(load_json_file(path))
        assert data == [{"title": "Good"}]
        assert "Skipping invalid JSON line 2" in caplog.text
        assert "Line 4 is not an object" in caplog.text
    finally:
        os.remove(path)

def test_load_json_file_reports_skipped(caplog):
    caplog.set_level(logging.INFO, logger="ingestion.ingest")
    with tempfile.NamedTemporaryFile(mode="w+", delete=False) as f:
        json.dump([valid_movie, "not a movie", 42, valid_movie], f)
        path = f.name

    try:
        data = list(load_json_file(path))
        assert len(data) == 2
        assert "Item 2 is not an object" in caplog.text
        assert f"Read 2 objects from {path}, skipped 2" in caplog.text
    finally:
        os.remove(path)

# -------------------------------
# ingest_one / ingest_many
# -------------------------------

def test_ingest_one_valid_drops_storage_fields():
    movie = ingest_one(valid_movie, Movie)

    assert movie.title == "Inception"
    assert movie.year == 2010
    assert movie.id is None
    assert movie.version is None

@pytest.mark.parametrize("raw", [invalid_movie_missing_title, invalid_movie_unknown_field, invalid_movie_wrong_type])
def test_ingest_one_invalid(raw):
    assert ingest_one(raw, Movie) is None

def test_ingest_many_skips_invalid():
    movies = ingest_many([valid_movie, invalid_movie_missing_title, valid_movie], Movie)
    assert len(movies) == 2

def test_ingest_many_strict():
    with pytest.raises(ValueError):
        ingest_many([valid_movie, invalid_movie_missing_title], Movie, continue_on_error=False)

# -------------------------------
# load_into
# -------------------------------

def test_load_into_inserts_valid_records(models):
    count = load_into(models.movies, [valid_movie, invalid_movie_missing_title])

    assert count == 1
    movie = models.movies.get_by_field("title", "Inception")
    assert movie.version == 1
    assert movie.genres == ["Action", "Sci-Fi"]

def test_load_into_directors(models):
    count = load_into(models.directors, [
        {"name": "Christopher", "surname": "Nolan", "awards": ["Oscar"]},
        {"name": "Greta", "surname": "Gerwig"},
    ])
    assert count == 2
    assert models.directors.get_by_field("surname", "Gerwig").awards == []

# -------------------------------
# save_jsonl
# -------------------------------

def test_save_jsonl_records(models):
    movie = models.movies.insert(Movie(title="Dune", year=2021, runtime=155, genres=["sci-fi"]))

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "movies.jsonl")
        assert save_jsonl([movie, {"title": "raw"}], path) == 2

        with open(path, encoding="utf-8") as f:
            lines = [json.loads(line) for line in f]

        assert lines[0]["title"] == "Dune"
        assert lines[0]["id"] == movie.id
        assert isinstance(lines[0]["created_at"], str)
        assert lines[1] == {"title": "raw"}
        assert [n for n in os.listdir(tmp) if n.startswith(".tmp_export_")] == []

def test_save_jsonl_round_trips_into_loader(models):
    models.directors.insert(Director(name="Denis", surname="Villeneuve"))
    records, _ = models.directors.list("", [], _first_page(models.directors))

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "directors.jsonl")
        save_jsonl(records, path)
        assert [d["surname"] for d in load_json_file(path)] == ["Villeneuve"]

def _first_page(repo):
    return Filters.validate(1, 20, "id", repo.entity.sort_safelist)
