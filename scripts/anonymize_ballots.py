"""Anonymize voter names in a ballot file.

Finds every voter name in a text or JSON ballot file, generates fake
replacements using faker with a fixed seed, and writes an anonymized copy.
Candidate names and rankings are left untouched.

Usage:
    python scripts/anonymize_ballots.py ballots.txt
    python scripts/anonymize_ballots.py ballots.json -o tests/test_parsers/fixtures/sample.json
"""

import argparse
import json
import re
from pathlib import Path

from faker import Faker

SEED = 20150115

VOTE_LINE = re.compile(r"^(\s*VOTE\s*:\s*)([^:]*?)(\s*(?::.*)?)$", re.IGNORECASE)


def discover_voters_text(text: str) -> set[str]:
    """Discover voter names on VOTE lines of a text ballot file."""
    voters: set[str] = set()
    for line in text.splitlines():
        match = VOTE_LINE.match(line)
        if match and match.group(2):
            voters.add(match.group(2))
    return voters


def discover_voters_json(data: dict) -> set[str]:
    """Discover voter names in a JSON ballot file."""
    return {
        ballot["voter"]
        for ballot in data.get("ballots", [])
        if isinstance(ballot, dict) and ballot.get("voter")
    }


def generate_fake_names(names: set[str], seed: int) -> dict[str, str]:
    """Generate a mapping of real voter names to fake ones.

    Case variants of the same name (e.g. "JSMITH" and "jsmith") get the
    same replacement, and no fake name collides with a real one.
    """
    fake = Faker(["en_US", "en_GB", "de_DE", "fr_FR"])
    Faker.seed(seed)

    taken = {n.lower() for n in names}
    mapping: dict[str, str] = {}
    by_lower: dict[str, str] = {}

    for name in sorted(names, key=lambda n: (n.lower(), n)):
        lower = name.lower()
        if lower not in by_lower:
            fake_name = fake.name()
            while fake_name.lower() in taken:
                fake_name = fake.name()
            taken.add(fake_name.lower())
            by_lower[lower] = fake_name
        replacement = by_lower[lower]
        mapping[name] = replacement.upper() if name.isupper() else replacement

    return mapping


def anonymize_text(text: str, mapping: dict[str, str]) -> str:
    """Replace voter names on VOTE lines only."""
    lines = []
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        ending = line[len(body):]
        match = VOTE_LINE.match(body)
        if match and match.group(2) in mapping:
            body = match.group(1) + mapping[match.group(2)] + match.group(3)
        lines.append(body + ending)
    return "".join(lines)


def anonymize_json(data: dict, mapping: dict[str, str]) -> dict:
    ballots = []
    for ballot in data.get("ballots", []):
        if isinstance(ballot, dict) and ballot.get("voter") in mapping:
            ballot = {**ballot, "voter": mapping[ballot["voter"]]}
        ballots.append(ballot)
    return {**data, "ballots": ballots}


def main():
    parser = argparse.ArgumentParser(
        description="Anonymize voter names in a ballot file")
    parser.add_argument("input", help="Path to the input ballot file (.txt or .json)")
    parser.add_argument("-o", "--output",
                        help="Output path (default: <input>-anon<suffix>)")
    args = parser.parse_args()

    input_path = Path(args.input)
    text = input_path.read_text(encoding="utf-8")
    is_json = input_path.suffix.lower() == ".json"

    if is_json:
        data = json.loads(text)
        names = discover_voters_json(data)
    else:
        names = discover_voters_text(text)
    print(f"Found {len(names)} unique voter names")

    mapping = generate_fake_names(names, SEED)

    for original, fake in sorted(mapping.items()):
        print(f"  {original} -> {fake}")

    if is_json:
        result = json.dumps(anonymize_json(data, mapping), indent=2) + "\n"
        remaining = discover_voters_json(json.loads(result)) & names
    else:
        result = anonymize_text(text, mapping)
        remaining = discover_voters_text(result) & names

    if remaining:
        print(f"WARNING: {len(remaining)} names still found: {sorted(remaining)}")
    else:
        print("All names successfully replaced.")

    output_path = Path(args.output) if args.output else input_path.with_stem(input_path.stem + "-anon")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result, encoding="utf-8")
    print(f"Written to {output_path}")


if __name__ == "__main__":
    main()
