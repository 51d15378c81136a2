import unittest

from simctl.common.args import parse_map_args, split_csv


class ParseMapArgsTests(unittest.TestCase):
    def test_each_string_becomes_one_map(self) -> None:
        parsed = parse_map_args(["cpu=2;memory=4Gi", "cpu=4;memory=8Gi;nvidia.com/gpu=1"])
        self.assertEqual(
            parsed,
            [
                {"cpu": "2", "memory": "4Gi"},
                {"cpu": "4", "memory": "8Gi", "nvidia.com/gpu": "1"},
            ],
        )

    def test_malformed_tokens_are_dropped(self) -> None:
        parsed = parse_map_args(["cpu=2;memory;gpu=a=b;zone="])
        self.assertEqual(parsed, [{"cpu": "2", "zone": ""}])

    def test_string_without_valid_tokens_yields_no_entry(self) -> None:
        parsed = parse_map_args(["cpu=2", "garbage;more-garbage", "a=b"])
        self.assertEqual(len(parsed), 2)
        self.assertEqual(parsed, [{"cpu": "2"}, {"a": "b"}])

    def test_empty_input(self) -> None:
        self.assertEqual(parse_map_args([]), [])
        self.assertEqual(parse_map_args(None), [])


class SplitCsvTests(unittest.TestCase):
    def test_repeated_and_comma_separated_values_are_flattened(self) -> None:
        self.assertEqual(split_csv(["q1,q2", "q3", ""]), ["q1", "q2", "q3"])

    def test_none_is_empty(self) -> None:
        self.assertEqual(split_csv(None), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
