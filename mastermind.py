#!/usr/bin/env python3
"""
mastermind.py

A Mastermind helper that suggests guesses by maximizing expected information gain (entropy).
You play Mastermind elsewhere; after each guess you type the number of black and white pegs here.

Colors and positions:
- The colors are given as a string of distinct characters, e.g. "rgbcmy".
- Any number of positions is supported, as long as colors**positions stays reasonable.

Feedback format:
- "intent black white", e.g. "rrgb 1 2"

Usage:
  python3 mastermind.py rgbcmy 4
"""

import argparse
import itertools
import math
import sys
import time
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import tqdm


Outcome = Tuple[int, int]  # (black, white)
LogFn = Callable[[str], None]

# K**L above this is refused at construction; every guess is scored against every candidate
MAX_UNIVERSE_SIZE = 1_000_000


class MastermindError(ValueError):
    """Base class for everything the assistant raises on bad input."""


class InvalidConfiguration(MastermindError):
    pass


class ResourceExhausted(MastermindError):
    pass


class UnknownSymbol(MastermindError):
    pass


class InvalidSequence(MastermindError):
    pass


class InconsistentFeedback(MastermindError):
    """No remaining candidate reproduces the reported feedback."""


# compute Mastermind feedback for guess given the secret
def evaluate(secret: str, guess: str) -> Outcome:
    """
    black = right color in the right position,
    white = right color in the wrong position (counted with multiplicity, blacks excluded).
    """
    if len(secret) != len(guess):
        raise ValueError(f"Sequences differ in length: {secret!r} vs {guess!r}")
    black = 0
    white = 0
    # balance[c] = occurrences of c in guess - occurrences of c in secret, over mismatched positions seen so far
    balance: Dict[str, int] = {}
    for s_ch, g_ch in zip(secret, guess):
        if s_ch == g_ch:
            black += 1
            continue
        b = balance.get(g_ch, 0)
        if b < 0:
            white += 1
        balance[g_ch] = b + 1
        b = balance.get(s_ch, 0)
        if b > 0:
            white += 1
        balance[s_ch] = b - 1
    return black, white


# map a (black, white) pair to 0..num_outcomes(length)-1
# note index(length - 1, 1) is counted but never occurs
def outcome_index(black: int, white: int, length: int) -> int:
    return black * (2 * length + 3 - black) // 2 + white


def num_outcomes(length: int) -> int:
    return outcome_index(length + 1, 0, length)


def is_valid_outcome(black: int, white: int, length: int) -> bool:
    if black < 0 or white < 0 or black + white > length:
        return False
    return not (black == length - 1 and white == 1)


# compute Shannon entropy from counts
# H(X) = - sum(p(x) * log2(p(x))) over all outcomes x
# the counts are how many candidates yield each (black, white) outcome for one guess
def entropy_from_counts(counts: Iterable[int], total: int) -> float:
    """Shannon entropy in bits, from bucket counts"""
    if total <= 1:
        return 0.0
    h = 0.0
    # summed in sorted order so equal count multisets give identical floats
    for c in sorted(c for c in counts if c):
        p = c / total
        h -= p * math.log2(p)
    return h


# num_colors ** length, but stops multiplying once the product passes limit
def universe_size(num_colors: int, length: int, limit: int) -> int:
    if num_colors <= 1:
        return num_colors
    size = 1
    for _ in range(length):
        size *= num_colors
        if size > limit:
            break
    return size


# all sequences of the given length over colors, in lexicographic order of the alphabet
def generate_universe(colors: str, length: int) -> List[str]:
    return ["".join(p) for p in itertools.product(colors, repeat=length)]


def _partitions(n: int, k: int, max_term: int, prefix: List[int], result: List[List[int]]) -> None:
    if n > max_term * k:
        return
    if n == 0:
        result.append(list(prefix))
        return
    for i in range(min(n, max_term), 0, -1):
        prefix.append(i)
        _partitions(n - i, k - 1, i, prefix, result)
        prefix.pop()


def partitions(n: int, max_parts: int) -> List[List[int]]:
    """
    Partitions of n into at most max_parts non-increasing positive terms,
    largest first term first: partitions(4, 2) == [[4], [3, 1], [2, 2]].

    Every partition stands for all guesses with that color distribution,
    since permuting colors does not change the entropy of an opening guess.
    """
    if n < 0 or max_parts < 0:
        raise ValueError(f"partitions needs non-negative arguments, got n={n}, max_parts={max_parts}")
    result: List[List[int]] = []
    _partitions(n, max_parts, n, [], result)
    return result


# solver class for Mastermind using entropy maximization
class MastermindAssistant:
    def __init__(
        self,
        colors: str,
        num_positions: int,
        *,
        max_universe: int = MAX_UNIVERSE_SIZE,
        log: Optional[LogFn] = None,
    ):
        if not colors:
            raise InvalidConfiguration("At least one color is required.")
        if any(len(c) != 1 for c in colors):
            raise InvalidConfiguration(f"Colors must be single characters, got {colors!r}.")
        if len(set(colors)) != len(colors):
            raise InvalidConfiguration(f"Colors must be distinct, got {colors!r}.")
        if num_positions <= 0:
            raise InvalidConfiguration(f"Number of positions must be positive, got {num_positions}.")
        if universe_size(len(colors), num_positions, max_universe) > max_universe:
            raise ResourceExhausted(
                f"{len(colors)} colors on {num_positions} positions give more than {max_universe} sequences."
            )

        self.colors = "".join(colors)
        self.num_positions = num_positions
        self._log = log
        self._color_index = {c: i for i, c in enumerate(self.colors)}

        # targets that are still possible
        self.candidates: List[str] = generate_universe(self.colors, num_positions)
        # every sequence may be played, even one that can no longer be the target
        self.intents: Tuple[str, ...] = tuple(self.candidates)

        # colors in one class can be permuted without changing any entropy
        self.color_class_list: List[str] = [self.colors]
        self._color_class_index: Dict[str, int] = {}
        self._build_color_class_index()

        self._info(f"init: colors={self.colors} positions={num_positions} candidates={len(self.candidates)}")

    def _info(self, msg: str) -> None:
        if self._log is not None:
            self._log(msg)

    def _check(self, seq: str) -> str:
        if len(seq) != self.num_positions:
            raise InvalidSequence(f"{seq!r} has {len(seq)} positions, expected {self.num_positions}.")
        for c in seq:
            if c not in self._color_index:
                raise UnknownSymbol(f"{c!r} in {seq!r} is not one of the colors {self.colors!r}.")
        return seq

    def num_candidates(self) -> int:
        return len(self.candidates)

    def iter_candidates(self) -> Iterator[str]:
        return iter(self.candidates)

    def evaluate(self, target: str, intent: str) -> Outcome:
        return evaluate(self._check(target), self._check(intent))

    def _entropy(self, intent: str) -> float:
        length = self.num_positions
        counts = [0] * num_outcomes(length)
        for target in self.candidates:
            black, white = evaluate(target, intent)
            counts[outcome_index(black, white, length)] += 1
        return entropy_from_counts(counts, total=len(self.candidates))

    # expected information gain of an intent over the remaining candidates
    def entropy(self, intent: str) -> float:
        return self._entropy(self._check(intent))

    def partition_intent(self, partition: List[int]) -> str:
        """The canonical intent for a partition: part i repeats color i."""
        if len(partition) > len(self.colors) or sum(partition) != self.num_positions:
            raise ValueError(f"{partition} is not a partition of {self.num_positions} into at most {len(self.colors)} parts.")
        return "".join(color * num for color, num in zip(self.colors, partition))

    def choose_initial_intent(self) -> List[int]:
        """
        With all colors interchangeable, opening intents are equivalent up to
        their color distribution. Returns the best partition of the positions.
        """
        best: Optional[List[int]] = None
        max_entropy = -1.0
        for partition in partitions(self.num_positions, len(self.colors)):
            h = self._entropy(self.partition_intent(partition))
            if h > max_entropy:
                best, max_entropy = partition, h
        assert best is not None
        self._info(f"initial: best grouping {best} ({max_entropy:.4f} bits)")
        return best

    def _iter_intents(self, show_progress: bool, desc: str) -> Iterable[str]:
        if show_progress:
            return tqdm.tqdm(self.intents, desc=desc, unit="intent")
        return self.intents

    # first optimal intent that is still a possible target, else the first optimal one
    def _pick_intent(self, optimal: List[int]) -> str:
        alive = set(self.candidates)
        for i in optimal:
            if self.intents[i] in alive:
                return self.intents[i]
        return self.intents[optimal[0]]

    def choose_intent(self, show_progress: bool = False) -> str:
        optimal: List[int] = []
        max_entropy = -1.0
        for i, intent in enumerate(self._iter_intents(show_progress, "Scoring intents")):
            h = self._entropy(intent)
            if h >= max_entropy:
                if h > max_entropy:
                    optimal.clear()
                    max_entropy = h
                optimal.append(i)
        return self._pick_intent(optimal)

    def choose_2nd_intent(self, show_progress: bool = False) -> str:
        """
        Like choose_intent, but scores each class of equivalent intents once.
        Only correct if update_equivalences has seen every intent played so far.
        """
        cache: Dict[str, float] = {}
        optimal: List[int] = []
        max_entropy = -1.0
        for i, intent in enumerate(self._iter_intents(show_progress, "Scoring intent classes")):
            rep = self.intent_class(intent)
            h = cache.get(rep)
            if h is None:
                h = cache[rep] = self._entropy(rep)
            if h >= max_entropy:
                if h > max_entropy:
                    optimal.clear()
                    max_entropy = h
                optimal.append(i)
        self._info(f"choose: scored {len(cache)} intent classes out of {len(self.intents)} intents")
        return self._pick_intent(optimal)

    # top_k intents by entropy, ties kept in intent order
    def suggest(self, top_k: int = 10, show_progress: bool = False) -> List[Tuple[str, float]]:
        scored = [(g, self._entropy(g)) for g in self._iter_intents(show_progress, "Scoring intents")]
        scored.sort(key=lambda x: x[1], reverse=True)
        return scored[:top_k]

    def color_classes(self, intent: str) -> List[str]:
        """
        Colors grouped by how often they occur in the intent (zero included),
        ordered by that count. Colors keep alphabet order within a group.
        """
        self._check(intent)
        counter = [0] * len(self.colors)
        for c in intent:
            counter[self._color_index[c]] += 1
        groups: List[str] = [""] * (max(counter) + 1)
        for color, count in zip(self.colors, counter):
            groups[count] += color
        return [g for g in groups if g]

    def _build_color_class_index(self) -> None:
        self._color_class_index = {
            color: i for i, cls in enumerate(self.color_class_list) for color in cls
        }

    def color_class(self, color: str) -> Optional[str]:
        i = self._color_class_index.get(color)
        if i is None:
            return None
        return self.color_class_list[i]

    def exist_equivalences(self) -> bool:
        return any(len(cls) > 1 for cls in self.color_class_list)

    # refine the color classes: after this intent, colors it treats differently are no longer equivalent
    def update_equivalences(self, intent: str) -> None:
        intent_classes = self.color_classes(intent)
        if not self.exist_equivalences():
            return
        new_classes: List[str] = []
        for cls in self.color_class_list:
            for other in intent_classes:
                common = "".join(c for c in cls if c in other)
                if common:
                    new_classes.append(common)
        if len(new_classes) != len(self.color_class_list):
            self._info(f"equivalences: {self.color_class_list} -> {new_classes}")
        self.color_class_list = new_classes
        self._build_color_class_index()

    def intent_class(self, intent: str) -> str:
        """
        Canonical representative of the intent: within each color class, colors
        are renamed to the class members in order of first appearance.
        """
        mappings: List[Dict[str, str]] = [{} for _ in self.color_class_list]
        rep = []
        for color in intent:
            try:
                i = self._color_class_index[color]
            except KeyError:
                raise UnknownSymbol(f"{color!r} in {intent!r} is not one of the colors {self.colors!r}.") from None
            mapping = mappings[i]
            if color not in mapping:
                mapping[color] = self.color_class_list[i][len(mapping)]
            rep.append(mapping[color])
        return "".join(rep)

    def update(self, intent: str, black: int, white: int) -> float:
        """
        Keep only the candidates that give (black, white) for this intent.
        Returns the information gained in bits.
        """
        self._check(intent)
        length = self.num_positions
        if not is_valid_outcome(black, white, length):
            raise InconsistentFeedback(f"black={black} white={white} is not possible with {length} positions.")
        target = outcome_index(black, white, length)
        new_candidates = [
            t for t in self.candidates if outcome_index(*evaluate(t, intent), length) == target
        ]
        if not new_candidates:
            raise InconsistentFeedback(
                f"No remaining candidate gives black={black} white={white} for {intent!r}."
            )
        before = len(self.candidates)
        self.candidates = new_candidates
        self._info(f"update: candidates {before} -> {len(new_candidates)}")
        self.update_equivalences(intent)
        return math.log2(before / len(new_candidates))


def parse_feedback(line: str) -> Tuple[str, int, int]:
    parts = line.split()
    if len(parts) != 3:
        raise MastermindError("Expected 'intent black white', e.g. 'rrgb 1 2'.")
    try:
        return parts[0], int(parts[1]), int(parts[2])
    except ValueError:
        raise MastermindError("Black and white must be whole numbers.") from None


def cli(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Mastermind entropy assistant (interactive CLI).")
    ap.add_argument("colors", type=str, help="The colors, one character each, e.g. rgbcmy.")
    ap.add_argument("positions", type=int, help="Number of positions in the code.")
    ap.add_argument("--max-universe", type=int, default=MAX_UNIVERSE_SIZE,
                    help="Refuse configurations with more possible codes than this.")
    ap.add_argument("--progress", action="store_true", help="Show progress bars while scoring hints.")
    ap.add_argument("--verbose", action="store_true", help="Print solver details to the console.")
    args = ap.parse_args(argv)

    start_t = time.time()

    def log(msg: str) -> None:
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] {msg}")

    try:
        assistant = MastermindAssistant(
            args.colors, args.positions, max_universe=args.max_universe, log=log if args.verbose else None
        )
    except MastermindError as e:
        print(e, file=sys.stderr)
        return 2

    grouping = assistant.choose_initial_intent()
    print("You could try any string with the following grouping of colors: "
          + ",".join(str(n) for n in grouping)
          + f" (e.g. {assistant.partition_intent(grouping)})")

    while True:
        try:
            line = input("intent black white> ").strip()
        except EOFError:
            return 0
        if line == "quit":
            return 0
        try:
            intent, black, white = parse_feedback(line)
            h = assistant.entropy(intent)
            info = assistant.update(intent, black, white)
        except MastermindError as e:
            print(f"{e}\n")
            continue

        print(f"The entropy (expected information gain) of your intent is {h:.2f} bits")
        print(f"You gained {info:.2f} bits of information")

        if assistant.num_candidates() == 1:
            break

        print(f"There are {assistant.num_candidates()} possible targets left")
        try:
            hint = input("do you want a hint (y/n) ").strip().lower()
        except EOFError:
            return 0
        if hint == "y":
            if assistant.exist_equivalences():
                proposal = assistant.choose_2nd_intent(show_progress=args.progress)
            else:
                proposal = assistant.choose_intent(show_progress=args.progress)
            print(f"You could try {proposal} (entropy {assistant.entropy(proposal):.2f} bits)")

    print(f"The only possibility is {next(assistant.iter_candidates())}")
    return 0


if __name__ == "__main__":
    raise SystemExit(cli())
