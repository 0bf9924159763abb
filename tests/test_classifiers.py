"""Tests for the bundled classifiers."""

import json
from datetime import date

import pytest

from conftest import make_document, make_sentence
from nercombine.classifiers import (
    LexiconTagger,
    NumberSequenceClassifier,
    RegexNERClassifier,
    TimeExpressionClassifier,
    load_classifier,
)
from nercombine.classifiers.numeric import parse_number_words
from nercombine.classifiers.regexner import parse_rule
from nercombine.exceptions import ClassifierLoadError
from nercombine.models import Document


def tags(output):
    return [o.ner for o in output]


def normalized(output):
    return [o.normalized_ner for o in output]


class TestLexiconTagger:
    """Tests for the count-based statistical tagger."""

    @pytest.fixture
    def tagger(self):
        tagger = LexiconTagger(min_count=2)
        tagger.train([
            [("John", "PERSON"), ("lives", "O"), ("in", "O"), ("Paris", "LOCATION")],
            [("John", "PERSON"), ("visited", "O"), ("Paris", "LOCATION")],
            [("in", "O"), ("Berlin", "LOCATION")],
        ])
        return tagger

    def test_predicts_most_frequent_tag(self, tagger):
        sentence = make_sentence(["John", "lives", "in", "Paris", "."])
        assert tags(tagger.classify(sentence.tokens)) == ["PERSON", "O", "O", "LOCATION", "O"]

    def test_rare_word_defers(self, tagger):
        """Berlin was seen once, below min_count."""
        assert tagger.predict("Berlin") is None

    def test_case_insensitive_lookup(self, tagger):
        assert tagger.predict("JOHN") == "PERSON"

    def test_low_probability_defers(self):
        tagger = LexiconTagger(counts={"jordan": {"PERSON": 5, "LOCATION": 5}}, min_probability=0.6)
        assert tagger.predict("Jordan") is None

    def test_label_consistency_from_earlier_sentence(self, tagger):
        """An undecided word reuses the tag it got earlier in the document."""
        document = make_document(["Berlin", "is", "big"], ["Berlin", "again"])
        document.sentences[0].tokens[0].ner = "LOCATION"

        output = tagger.classify(document.sentences[1].tokens, document, document.sentences[1])

        assert output[0].ner == "LOCATION"

    def test_no_context_from_current_or_later_sentences(self, tagger):
        document = make_document(["Berlin", "again"], ["Berlin", "is", "big"])
        document.sentences[1].tokens[0].ner = "LOCATION"

        output = tagger.classify(document.sentences[0].tokens, document, document.sentences[0])

        assert output[0].ner == "O"

    def test_global_information_can_be_disabled(self, tagger):
        tagger.use_global_information = False
        document = make_document(["Berlin"], ["Berlin"])
        document.sentences[0].tokens[0].ner = "LOCATION"

        output = tagger.classify(document.sentences[1].tokens, document, document.sentences[1])

        assert output[0].ner == "O"

    def test_save_and_load(self, tagger, tmp_path):
        path = tmp_path / "models" / "people.json"
        tagger.save(path)

        loaded = LexiconTagger.load(path)

        assert loaded.name == "people"
        assert loaded.min_count == 2
        assert loaded.predict("paris") == "LOCATION"

    def test_load_missing(self, tmp_path):
        with pytest.raises(ClassifierLoadError, match="not found"):
            LexiconTagger.load(tmp_path / "missing.json")

    def test_load_corrupt(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ClassifierLoadError, match="Unreadable"):
            LexiconTagger.load(path)

    def test_load_wrong_type(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"type": "crf", "counts": {}}), encoding="utf-8")
        with pytest.raises(ClassifierLoadError, match="Not a lexicon model"):
            LexiconTagger.load(path)

    @pytest.mark.parametrize("counts", [
        {"paris": {"LOCATION": "12"}},
        {"paris": ["LOCATION"]},
        {"paris": {"LOCATION": 1.5}},
    ])
    def test_load_bad_counts(self, tmp_path, counts):
        path = tmp_path / "bad_counts.json"
        path.write_text(json.dumps({"type": "lexicon", "counts": counts}), encoding="utf-8")
        with pytest.raises(ClassifierLoadError, match="Malformed lexicon model"):
            LexiconTagger.load(path)

    @pytest.mark.parametrize("thresholds", [{"min_count": "many"}, {"min_probability": "high"}])
    def test_load_bad_thresholds(self, tmp_path, thresholds):
        path = tmp_path / "bad_thresholds.json"
        path.write_text(json.dumps({"type": "lexicon", "counts": {}, **thresholds}), encoding="utf-8")
        with pytest.raises(ClassifierLoadError, match="Malformed lexicon model"):
            LexiconTagger.load(path)

    def test_label_consistency_ignores_case(self, tagger):
        document = make_document(["Zed", "spoke"], ["ZED", "left"])
        document.sentences[0].tokens[0].ner = "PERSON"

        output = tagger.classify(document.sentences[1].tokens, document, document.sentences[1])

        assert output[0].ner == "PERSON"


class TestRegexNERClassifier:
    """Tests for rule-based tagging."""

    def test_longest_match_wins(self, mapping_file):
        classifier = RegexNERClassifier.load(mapping_file)
        sentence = make_sentence(["I", "love", "New", "York", "City", "."])

        output = classifier.classify(sentence.tokens)

        assert tags(output) == ["O", "O", "LOCATION", "LOCATION", "LOCATION", "O"]
        assert normalized(output)[2:5] == ["NYC", "NYC", "NYC"]

    def test_shorter_rule_without_normalization(self, mapping_file):
        classifier = RegexNERClassifier.load(mapping_file)
        output = classifier.classify(make_sentence(["New", "York", "is", "big"]).tokens)
        assert tags(output) == ["LOCATION", "LOCATION", "O", "O"]
        assert normalized(output) == [None, None, None, None]

    def test_regex_token(self, mapping_file):
        classifier = RegexNERClassifier.load(mapping_file)
        output = classifier.classify(make_sentence(["Acme", "Corp.", "Acme", "Corp"]).tokens)
        assert tags(output) == ["ORGANIZATION"] * 4

    def test_name_from_file_stem(self, mapping_file):
        assert RegexNERClassifier.load(mapping_file).name == "rules"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ClassifierLoadError, match="not found"):
            RegexNERClassifier.load(tmp_path / "missing.tab")

    def test_malformed_line_reports_location(self, tmp_path):
        path = tmp_path / "broken.tab"
        path.write_text("Paris\tLOCATION\nno tag here\n", encoding="utf-8")
        with pytest.raises(ClassifierLoadError, match="broken.tab:2"):
            RegexNERClassifier.load(path)

    def test_bad_regex(self):
        with pytest.raises(ValueError, match="bad pattern"):
            parse_rule("New(\tLOCATION")

    def test_ignore_case(self):
        rule = parse_rule("paris\tLOCATION", ignore_case=True)
        classifier = RegexNERClassifier([rule])
        assert tags(classifier.classify(make_sentence(["PARIS"]).tokens)) == ["LOCATION"]


class TestNumberSequenceClassifier:
    """Tests for numeric entity tagging."""

    @pytest.fixture
    def classifier(self):
        return NumberSequenceClassifier()

    def test_plain_number(self, classifier):
        output = classifier.classify(make_sentence(["I", "have", "1,250", "books"]).tokens)
        assert tags(output) == ["O", "O", "NUMBER", "O"]
        assert output[2].normalized_ner == "1250.0"
        assert output[2].fields == {"numeric_type": "NUMBER", "numeric_value": 1250.0}

    def test_number_words(self, classifier):
        output = classifier.classify(make_sentence(["two", "hundred", "forty-one", "cats"]).tokens)
        assert tags(output) == ["NUMBER", "NUMBER", "NUMBER", "O"]
        assert output[0].normalized_ner == "241.0"

    def test_magnitude(self, classifier):
        output = classifier.classify(make_sentence(["3", "million", "people"]).tokens)
        assert normalized(output)[:2] == ["3000000.0", "3000000.0"]

    def test_ordinals(self, classifier):
        output = classifier.classify(make_sentence(["the", "3rd", "and", "first"]).tokens)
        assert tags(output) == ["O", "ORDINAL", "O", "ORDINAL"]
        assert normalized(output)[3] == "1.0"

    def test_money_symbol_before(self, classifier):
        output = classifier.classify(make_sentence(["costs", "$", "20.50"]).tokens)
        assert tags(output) == ["O", "MONEY", "MONEY"]
        assert output[1].normalized_ner == "$20.5"

    def test_money_inline_and_currency_word(self, classifier):
        output = classifier.classify(make_sentence(["$5", "or", "10", "euros"]).tokens)
        assert tags(output) == ["MONEY", "O", "MONEY", "MONEY"]
        assert normalized(output)[2] == "€10.0"

    def test_percent(self, classifier):
        output = classifier.classify(make_sentence(["50", "%", "and", "7%"]).tokens)
        assert tags(output) == ["PERCENT", "PERCENT", "O", "PERCENT"]
        assert normalized(output)[0] == "%50.0"
        assert normalized(output)[3] == "%7.0"

    def test_cd_without_value(self, classifier):
        sentence = make_sentence(["XIV", "kings"], pos=["CD", "NNS"])
        output = classifier.classify(sentence.tokens)
        assert tags(output) == ["NUMBER", "O"]
        assert output[0].normalized_ner is None
        assert output[0].fields == {"numeric_type": "NUMBER"}

    def test_lone_currency_symbol(self, classifier):
        assert tags(classifier.classify(make_sentence(["$", "sign"]).tokens)) == ["O", "O"]

    def test_parse_number_words(self):
        assert parse_number_words(["one", "thousand", "two", "hundred"]) == 1200.0
        assert parse_number_words(["ninety-nine"]) == 99.0


class TestTimeExpressionClassifier:
    """Tests for date and time tagging."""

    @pytest.fixture
    def classifier(self):
        return TimeExpressionClassifier()

    def test_iso_date(self, classifier):
        output = classifier.classify(make_sentence(["on", "2024-02-29"]).tokens)
        assert tags(output) == ["O", "DATE"]
        assert output[1].fields == {"timex_type": "DATE", "timex_value": "2024-02-29"}

    def test_invalid_iso_date_ignored(self, classifier):
        assert tags(classifier.classify(make_sentence(["2023-02-30"]).tokens)) == ["O"]

    def test_slash_date(self, classifier):
        output = classifier.classify(make_sentence(["12/25/2020"]).tokens)
        assert normalized(output) == ["2020-12-25"]

    def test_month_day_without_year(self, classifier):
        output = classifier.classify(make_sentence(["January", "5th", "it", "was"]).tokens)
        assert tags(output) == ["DATE", "DATE", "O", "O"]
        assert output[0].normalized_ner == "XXXX-01-05"

    def test_day_month_year(self, classifier):
        output = classifier.classify(make_sentence(["5", "March", "2019"]).tokens)
        assert normalized(output) == ["2019-03-05"] * 3

    def test_month_year(self, classifier):
        output = classifier.classify(make_sentence(["Sept.", "2001"]).tokens)
        assert normalized(output) == ["2001-09", "2001-09"]

    def test_lowercase_month_word_ignored(self, classifier):
        assert tags(classifier.classify(make_sentence(["you", "may", "go"]).tokens)) == ["O", "O", "O"]

    def test_year_after_cue(self, classifier):
        output = classifier.classify(make_sentence(["born", "in", "1984", "with", "1984", "cards"]).tokens)
        assert tags(output) == ["O", "O", "DATE", "O", "O", "O"]
        assert output[2].normalized_ner == "1984"

    def test_relative_days_resolved_against_doc_date(self, classifier):
        document = Document(doc_date=date(2024, 3, 1), sentences=[make_sentence(["yesterday", "."])])
        sentence = document.sentences[0]
        output = classifier.classify(sentence.tokens, document, sentence)
        assert output[0].normalized_ner == "2024-02-29"

    def test_relative_day_without_doc_date(self, classifier):
        output = classifier.classify(make_sentence(["today"]).tokens)
        assert output[0].ner == "DATE"
        assert output[0].normalized_ner is None
        assert output[0].fields == {"timex_type": "DATE"}

    def test_weekday(self, classifier):
        document = Document(doc_date=date(2024, 3, 1), sentences=[make_sentence(["Monday"])])
        sentence = document.sentences[0]
        assert classifier.classify(sentence.tokens, document, sentence)[0].normalized_ner == "2024-W09-1"
        assert classifier.classify(sentence.tokens)[0].normalized_ner == "XXXX-WXX-1"

    def test_clock_times(self, classifier):
        output = classifier.classify(make_sentence(["at", "3:30", "pm", "or", "noon"]).tokens)
        assert tags(output) == ["O", "TIME", "TIME", "O", "TIME"]
        assert output[1].normalized_ner == "T15:30"
        assert output[4].normalized_ner == "T12:00"

    def test_invalid_clock_ignored(self, classifier):
        assert tags(classifier.classify(make_sentence(["99:99"]).tokens)) == ["O"]


class TestLoadClassifier:
    """Tests for choosing an implementation by file type."""

    def test_json_loads_lexicon(self, tmp_path):
        path = tmp_path / "names.json"
        LexiconTagger(counts={"ada": {"PERSON": 3}}).save(path)
        assert isinstance(load_classifier(path), LexiconTagger)

    def test_other_loads_rules(self, mapping_file):
        assert isinstance(load_classifier(str(mapping_file)), RegexNERClassifier)

    def test_missing(self, tmp_path):
        with pytest.raises(ClassifierLoadError):
            load_classifier(tmp_path / "absent.tab")
