# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: BertTokenizer
# -----------------------------------------------------------------------------
import logging
import unicodedata
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from utility.errors import VocabularyError
from utility.logging_utils import get_class_logger

PAD_TOKEN = "[PAD]"
UNK_TOKEN = "[UNK]"
CLS_TOKEN = "[CLS]"
SEP_TOKEN = "[SEP]"
MASK_TOKEN = "[MASK]"

SPECIAL_TOKENS = (UNK_TOKEN, SEP_TOKEN, PAD_TOKEN, CLS_TOKEN, MASK_TOKEN)

DEFAULT_VOCAB_PATH = Path(__file__).resolve().parent / "resources" / "bert_tokenizer_vocab.txt"


def load_vocab(path: Path) -> Dict[str, int]:
    """
    One token per line, id = position among the non-empty lines.
    Duplicate entries make the id mapping ambiguous and are rejected.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise VocabularyError(f"Cannot read vocabulary file {path}: {e}") from e

    vocab: Dict[str, int] = {}
    for token in (line.rstrip("\r") for line in raw.split("\n")):
        if not token:
            continue
        if token in vocab:
            raise VocabularyError(f"Duplicate vocabulary entry {token!r} in {path}")
        vocab[token] = len(vocab)

    missing = [t for t in SPECIAL_TOKENS if t not in vocab]
    if missing:
        raise VocabularyError(f"Vocabulary {path} is missing special tokens: {missing}")

    return vocab


class BasicTokenizer:
    """
    Diacritic folding, whitespace split, lower-casing and punctuation split.
    Reserved control tokens pass through untouched.
    """

    never_split = SPECIAL_TOKENS

    @staticmethod
    def _fold_diacritics(text: str) -> str:
        decomposed = unicodedata.normalize("NFD", text)
        return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")

    def tokenize(self, text: str) -> List[str]:
        tokens: List[str] = []

        for token in self._fold_diacritics(text).split():
            if token in self.never_split:
                tokens.append(token)
                continue

            fragment = ""
            for ch in token.lower():
                if ch.isalpha() or ch.isnumeric() or ch == "°":
                    fragment += ch
                else:
                    if fragment:
                        tokens.append(fragment)
                        fragment = ""
                    tokens.append(ch)

            if fragment:
                tokens.append(fragment)

        return tokens


class WordpieceTokenizer:
    """Greedy longest-match-first sub-word split of a single basic token."""

    def __init__(self, vocab: Dict[str, int], unk_token: str = UNK_TOKEN, max_input_chars_per_word: int = 100):
        self.vocab = vocab
        self.unk_token = unk_token
        self.max_input_chars_per_word = max_input_chars_per_word

    def tokenize(self, word: str) -> List[str]:
        if len(word) > self.max_input_chars_per_word:
            return [self.unk_token]

        sub_tokens: List[str] = []
        start = 0
        while start < len(word):
            end = len(word)
            current: Optional[str] = None

            while start < end:
                piece = word[start:end]
                if start > 0:
                    piece = f"##{piece}"
                if piece in self.vocab:
                    current = piece
                    break
                end -= 1

            # one unmatched position poisons the whole word
            if current is None:
                return [self.unk_token]

            sub_tokens.append(current)
            start = end

        return sub_tokens


class BertTokenizer:
    """
    Vocabulary-driven sub-word tokenizer compatible with BERT-style vocab.txt files.

    Without `vocab_path` it loads the bundled demo vocabulary, a few hundred
    entries (specials, ASCII letters and digits, common English words and
    suffixes). That is enough for splitting and tests, but ids will not match
    any trained model. Pass the model's full vocab.txt (about 30k entries for
    bert-base-uncased) when building real model inputs.

    tokenize()/detokenize() feed the splitters; build_model_* produce the
    fixed-width numpy inputs an encoder model expects.
    """

    def __init__(
        self,
        vocab_path: Optional[str | Path] = None,
        *,
        max_len: int = 512,
        logger: logging.Logger | None = None,
    ):
        self.vocab_path = Path(vocab_path) if vocab_path else DEFAULT_VOCAB_PATH
        self.uses_bundled_vocab = self.vocab_path == DEFAULT_VOCAB_PATH
        self.max_len = max_len
        self.logger = logger or get_class_logger(self.__class__)

        self.vocab: Dict[str, int] = load_vocab(self.vocab_path)
        self.ids_to_tokens: Dict[int, str] = {i: t for t, i in self.vocab.items()}

        self.basic_tokenizer = BasicTokenizer()
        self.wordpiece_tokenizer = WordpieceTokenizer(vocab=self.vocab)

        self.pad_id = self.vocab[PAD_TOKEN]
        self.cls_id = self.vocab[CLS_TOKEN]
        self.sep_id = self.vocab[SEP_TOKEN]

        self.logger.debug("Loaded vocabulary of %d tokens from %s", len(self.vocab), self.vocab_path)
        if self.uses_bundled_vocab:
            self.logger.info(
                "Using the bundled demo vocabulary (%d tokens); set SIMSEARCH_VOCAB_PATH to a full BERT vocab.txt "
                "for model inputs",
                len(self.vocab),
            )

    @classmethod
    def from_config(cls, cfg) -> "BertTokenizer":
        return cls(cfg.vocab_path or None)

    # ---- text <-> tokens ----

    def tokenize(self, text: str) -> List[str]:
        tokens: List[str] = []
        for token in self.basic_tokenizer.tokenize(text):
            tokens.extend(self.wordpiece_tokenizer.tokenize(token))
        return tokens

    def detokenize(self, tokens: Sequence[str]) -> str:
        """
        Lossy: unknown tokens stay as [UNK], casing and original spacing are gone.
        """
        words: List[str] = []
        current = ""
        for token in tokens:
            if token.startswith("##"):
                current += token[2:]
            else:
                if current:
                    words.append(current)
                current = token
        if current:
            words.append(current)
        return " ".join(words)

    # ---- tokens <-> ids ----

    def token_to_id(self, token: str) -> int:
        try:
            return self.vocab[token]
        except KeyError as e:
            raise VocabularyError(f"Token {token!r} is not in the vocabulary") from e

    def convert_tokens_to_ids(self, tokens: Sequence[str]) -> List[int]:
        return [self.token_to_id(t) for t in tokens]

    def convert_ids_to_tokens(self, token_ids: Sequence[int]) -> List[str]:
        try:
            return [self.ids_to_tokens[i] for i in token_ids]
        except KeyError as e:
            raise VocabularyError(f"Token id {e.args[0]} is not in the vocabulary") from e

    def tokenize_to_ids(self, text: str) -> List[int]:
        return self.convert_tokens_to_ids(self.tokenize(text))

    # ---- model inputs ----

    def build_model_tokens(self, sentence: str) -> List[int]:
        """[CLS] + ids + [SEP], right-padded with [PAD] to max_len."""
        token_ids = self.tokenize_to_ids(sentence)

        boundary_count = 2  # [CLS] and [SEP]
        if len(token_ids) + boundary_count > self.max_len:
            self.logger.warning(
                "Input sentence is too long (%d > %d tokens), truncating.",
                len(token_ids) + boundary_count,
                self.max_len,
            )
            token_ids = token_ids[: self.max_len - boundary_count]

        padding = self.max_len - len(token_ids) - boundary_count
        return [self.cls_id] + token_ids + [self.sep_id] + [self.pad_id] * padding

    def build_model_inputs(self, input_tokens: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (input_ids, attention_mask), both int32 with shape (1, len)."""
        input_ids = np.asarray(input_tokens, dtype=np.int32).reshape(1, -1)
        attention_mask = (input_ids != self.pad_id).astype(np.int32)
        return input_ids, attention_mask

    def build_model_inputs_with_type_ids(
        self, input_tokens: Sequence[int]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Same as build_model_inputs plus token type ids: 0 up to the first [SEP],
        1 from that [SEP] onwards.
        """
        input_ids, attention_mask = self.build_model_inputs(input_tokens)

        encountered_sep = False
        type_values: List[int] = []
        for token in input_tokens:
            if token == self.sep_id:
                encountered_sep = True
            type_values.append(1 if encountered_sep else 0)

        token_type_ids = np.asarray(type_values, dtype=np.int32).reshape(1, -1)
        return input_ids, attention_mask, token_type_ids
