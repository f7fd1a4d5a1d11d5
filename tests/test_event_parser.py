import unittest

from note_raster.event_parser import U64_MAX, BadEvent, BadEventKind, Event, parse_event_line, parse_unsigned


class TestEventParser(unittest.TestCase):
    def test_parses_well_formed_line(self) -> None:
        self.assertEqual(parse_event_line("(3, 1200, 64)"), Event(channel=3, timestamp=1200, note=64))

    def test_parses_field_extremes(self) -> None:
        self.assertEqual(parse_event_line("(0, 0, 0)"), Event(channel=0, timestamp=0, note=0))
        self.assertEqual(
            parse_event_line(f"(255, {U64_MAX}, 255)"),
            Event(channel=255, timestamp=U64_MAX, note=255),
        )

    def test_rejects_line_without_wrapper(self) -> None:
        for line in ("3, 1200, 64", "(3, 1200, 64", "3, 1200, 64)", "", "(", ")", " (3, 1200, 64)"):
            with self.subTest(line=line):
                self.assertEqual(parse_event_line(line), BadEvent(BadEventKind.ENTIRE, line))

    def test_malformed_field_names_that_field(self) -> None:
        cases = {
            "(x, 1200, 64)": BadEvent(BadEventKind.CHANNEL, "x"),
            "(256, 1200, 64)": BadEvent(BadEventKind.CHANNEL, "256"),
            "(-1, 1200, 64)": BadEvent(BadEventKind.CHANNEL, "-1"),
            "(3, soon, 64)": BadEvent(BadEventKind.TIMESTAMP, "soon"),
            (f"(3, {U64_MAX + 1}, 64)"): BadEvent(BadEventKind.TIMESTAMP, str(U64_MAX + 1)),
            "(3, 1200, C4)": BadEvent(BadEventKind.NOTE, "C4"),
            "(3, 1200, 300)": BadEvent(BadEventKind.NOTE, "300"),
        }
        for line, expected in cases.items():
            with self.subTest(line=line):
                self.assertEqual(parse_event_line(line), expected)

    def test_missing_fields_carry_no_raw_text(self) -> None:
        self.assertEqual(parse_event_line("(3, 1200)"), BadEvent(BadEventKind.NOTE, None))
        self.assertEqual(parse_event_line("(3)"), BadEvent(BadEventKind.TIMESTAMP, None))

    def test_empty_interior_is_malformed_channel(self) -> None:
        self.assertEqual(parse_event_line("()"), BadEvent(BadEventKind.CHANNEL, ""))

    def test_spacing_variations_are_rejected(self) -> None:
        self.assertEqual(parse_event_line("(3,1200, 64)"), BadEvent(BadEventKind.CHANNEL, "3,1200"))
        self.assertEqual(parse_event_line("(3,  1200, 64)"), BadEvent(BadEventKind.TIMESTAMP, " 1200"))
        self.assertEqual(parse_event_line("(3, 1200, 64 )"), BadEvent(BadEventKind.NOTE, "64 "))

    def test_note_field_takes_remainder(self) -> None:
        self.assertEqual(parse_event_line("(3, 1200, 64, 9)"), BadEvent(BadEventKind.NOTE, "64, 9"))

    def test_first_failing_field_wins(self) -> None:
        self.assertEqual(parse_event_line("(a, b, c)"), BadEvent(BadEventKind.CHANNEL, "a"))

    def test_parse_unsigned(self) -> None:
        self.assertEqual(parse_unsigned("+7", 255), 7)
        self.assertEqual(parse_unsigned("007", 255), 7)
        self.assertIsNone(parse_unsigned("+", 255))
        self.assertIsNone(parse_unsigned("1_0", 255))
        self.assertIsNone(parse_unsigned("١", 255))  # Arabic-Indic digit one
        self.assertIsNone(parse_unsigned(" 1", 255))

    def test_bad_event_messages(self) -> None:
        self.assertEqual(str(BadEvent(BadEventKind.CHANNEL, "x")), "bad event: malformed channel 'x'")
        self.assertEqual(str(BadEvent(BadEventKind.NOTE, None)), "bad event: malformed note None")
        self.assertEqual(str(BadEvent(BadEventKind.ENTIRE, "junk")), "bad event 'junk'")

    def test_event_rejects_out_of_type_values(self) -> None:
        with self.assertRaises(ValueError):
            Event(channel=256, timestamp=0, note=0)
        with self.assertRaises(ValueError):
            Event(channel=0, timestamp=-1, note=0)
        with self.assertRaises(ValueError):
            Event(channel=0, timestamp=0, note=256)


if __name__ == "__main__":
    unittest.main()
