import unicodedata
import regex


def normalize_unicode(text):
    return unicodedata.normalize("NFKC", text)

def clean_punctuation(text):
    return regex.sub(r"[\p{P}\p{S}]+", " ", text)

def tokenize(text):
    """
    Lowercased word tokens, the same way the 'simple' text search
    configuration treats a document: no stop words, no stemming.
    """
    if not text:
        return []

    text = text.lower()

    text = normalize_unicode(text)

    text = clean_punctuation(text)

    return text.split()

def matches(document, query):
    """
    True when every token of *query* occurs in *document* (plainto_tsquery
    joins the query terms with AND). An empty query matches nothing.
    """
    query_tokens = set(tokenize(query))
    if not query_tokens:
        return False

    return query_tokens.issubset(tokenize(document))
