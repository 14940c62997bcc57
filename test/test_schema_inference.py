"""Tests for primitive classification and schema node evidence."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlstructize.common import XmlName
from xmlstructize.schema_inference import PrimitiveKind, SchemaNode, SchemaRegistry, classify_values, time_layouts
from xmlstructize.xmltogo import DEFAULT_TIME_LAYOUT


TIME_LAYOUT = '%Y-%m-%dT%H:%M:%SZ'


class TestClassifyValues(unittest.TestCase):
    """Test cases for classify_values."""

    def test_int(self):
        self.assertEqual(classify_values(['1', '2', '3']), PrimitiveKind.INT)

    def test_float(self):
        self.assertEqual(classify_values(['1', '2.5']), PrimitiveKind.FLOAT)

    def test_bool(self):
        self.assertEqual(classify_values(['true', 'false']), PrimitiveKind.BOOL)

    def test_digits_are_not_bools(self):
        self.assertEqual(classify_values(['1', '0', '1']), PrimitiveKind.INT)
        self.assertEqual(classify_values(['t', 'f']), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['True']), PrimitiveKind.STRING)

    def test_string(self):
        self.assertEqual(classify_values(['1', 'abc']), PrimitiveKind.STRING)

    def test_empty_collection(self):
        self.assertEqual(classify_values([]), PrimitiveKind.STRING)

    def test_only_empty_samples(self):
        self.assertEqual(classify_values(['', '']), PrimitiveKind.STRING)

    def test_empty_samples_do_not_disqualify(self):
        self.assertEqual(classify_values(['', '42', '']), PrimitiveKind.INT)
        self.assertEqual(classify_values(['', 'true']), PrimitiveKind.BOOL)

    def test_int64_overflow_is_float(self):
        self.assertEqual(classify_values(['9223372036854775807']), PrimitiveKind.INT)
        self.assertEqual(classify_values(['9223372036854775808']), PrimitiveKind.FLOAT)
        self.assertEqual(classify_values(['-9223372036854775808']), PrimitiveKind.INT)

    def test_float_notation(self):
        self.assertEqual(classify_values(['1e10', '-.5', '+3.', 'NaN', 'Inf']), PrimitiveKind.FLOAT)

    def test_float_overflow_is_string(self):
        self.assertEqual(classify_values(['1e400']), PrimitiveKind.STRING)

    def test_whitespace_and_underscores_are_strings(self):
        self.assertEqual(classify_values([' 1']), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['1_000']), PrimitiveKind.STRING)

    def test_oversized_numbers_are_strings(self):
        self.assertEqual(classify_values(['9' * 5000]), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['-' + '9' * 5000]), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['1', '9' * 20]), PrimitiveKind.FLOAT)

    def test_leading_zeros(self):
        self.assertEqual(classify_values(['0' * 5000 + '7']), PrimitiveKind.INT)
        self.assertEqual(classify_values(['-007']), PrimitiveKind.INT)

    def test_trailing_newline_is_string(self):
        self.assertEqual(classify_values(['12\n']), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['1.5\n']), PrimitiveKind.STRING)
        self.assertEqual(classify_values(['true\n']), PrimitiveKind.STRING)

    def test_rfc3339_default_layout(self):
        samples = ['2024-01-02T03:04:05+02:00', '2024-01-02T03:04:05.5Z', '2024-01-02T03:04:05Z',
                   '2024-01-02T03:04:05.123456-07:00']
        self.assertEqual(classify_values(samples, DEFAULT_TIME_LAYOUT), PrimitiveKind.TIME)

    def test_fractional_seconds(self):
        self.assertEqual(classify_values(['2023-01-02T03:04:05.250Z'], TIME_LAYOUT), PrimitiveKind.TIME)
        self.assertEqual(time_layouts('%H:%M:%S'), ['%H:%M:%S', '%H:%M:%S.%f'])
        self.assertEqual(time_layouts('%Y-%m-%d'), ['%Y-%m-%d'])

    def test_time(self):
        samples = ['2023-01-02T03:04:05Z', '2024-12-31T23:59:59Z']
        self.assertEqual(classify_values(samples, TIME_LAYOUT), PrimitiveKind.TIME)

    def test_time_disabled_by_empty_layout(self):
        samples = ['2023-01-02T03:04:05Z']
        self.assertEqual(classify_values(samples, ''), PrimitiveKind.STRING)

    def test_time_mixed_with_text(self):
        samples = ['2023-01-02T03:04:05Z', 'yesterday']
        self.assertEqual(classify_values(samples, TIME_LAYOUT), PrimitiveKind.STRING)

    def test_numbers_are_not_times(self):
        self.assertEqual(classify_values(['2023'], TIME_LAYOUT), PrimitiveKind.INT)


class TestSchemaNode(unittest.TestCase):
    """Test cases for SchemaNode evidence recording."""

    def setUp(self):
        self.node = SchemaNode(XmlName('', 'item'))

    def test_attribute_samples_are_deduplicated(self):
        name = XmlName('', 'id')
        self.node.record_attribute(name, '1')
        self.node.record_attribute(name, '1')
        self.node.record_attribute(name, '2')
        evidence = self.node.attributes[name]
        self.assertEqual(list(evidence.samples), ['1', '2'])
        self.assertEqual(evidence.count, 3)
        self.assertEqual(self.node.instance_count, 0)

    def test_attribute_sample_without_presence(self):
        name = XmlName('', 'x')
        self.node.record_attribute(name, '1')
        self.node.record_attribute(name, '2', present=False)
        evidence = self.node.attributes[name]
        self.assertEqual(list(evidence.samples), ['1', '2'])
        self.assertEqual(evidence.count, 1)

    def test_child_presence_and_repeats(self):
        child = XmlName('', 'c')
        self.node.record_child_occurrence(child, 1)
        self.node.record_child_occurrence(child, 2)
        self.node.record_child_occurrence(child, 0)
        self.assertEqual(self.node.children[child].count, 2)
        self.assertTrue(self.node.children[child].repeats)

    def test_repeats_never_clears(self):
        child = XmlName('', 'c')
        self.node.record_child_occurrence(child, 3)
        self.node.record_child_occurrence(child, 1)
        self.assertTrue(self.node.children[child].repeats)

    def test_char_data(self):
        self.node.record_char_data('')
        self.node.record_char_data('x')
        self.node.record_char_data('x')
        self.assertEqual(self.node.char_data_samples, ['', 'x'])
        self.assertTrue(self.node.has_char_data)

    def test_empty_char_data_is_not_content(self):
        self.node.record_char_data('')
        self.assertFalse(self.node.has_char_data)
        self.assertTrue(self.node.is_simple)

    def test_finalize_instance(self):
        self.node.finalize_instance()
        self.node.finalize_instance()
        self.assertEqual(self.node.instance_count, 2)

    def test_ensure_order_assigns_once(self):
        registry = SchemaRegistry()
        other = registry.lookup(XmlName('', 'other'))
        self.node.ensure_order(registry.order)
        other.ensure_order(registry.order)
        self.node.ensure_order(registry.order)
        self.assertEqual(self.node.first_seen_order, 1)
        self.assertEqual(other.first_seen_order, 2)

    def test_is_simple(self):
        self.assertTrue(self.node.is_simple)
        self.node.record_attribute(XmlName('', 'a'), 'b')
        self.assertFalse(self.node.is_simple)


class TestSchemaRegistry(unittest.TestCase):
    """Test cases for SchemaRegistry."""

    def test_lookup_creates_once(self):
        registry = SchemaRegistry()
        name = XmlName('', 'a')
        node = registry.lookup(name)
        self.assertIs(registry.lookup(name), node)
        self.assertIn(name, registry)
        self.assertEqual(len(registry), 1)

    def test_roots_keep_first_seen_order(self):
        registry = SchemaRegistry()
        registry.add_root(XmlName('', 'b'))
        registry.add_root(XmlName('', 'a'))
        registry.add_root(XmlName('', 'b'))
        self.assertEqual(list(registry.root_names), [XmlName('', 'b'), XmlName('', 'a')])


if __name__ == '__main__':
    unittest.main()
