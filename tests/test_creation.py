# tests/test_creation.py

import unittest
import numpy as np
from rigidframe import TransformMatrix

IDENTITY = [1.0, 0.0, 0.0, 0.0,
            0.0, 1.0, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0]


class TestCreation(unittest.TestCase):
    def test_default_is_identity(self):
        self.assertEqual(TransformMatrix().to_list(), IDENTITY)
        self.assertEqual(TransformMatrix.identity().to_list(), IDENTITY)

    def test_identities_do_not_share_storage(self):
        a = TransformMatrix()
        b = TransformMatrix()
        a.set_position(1, 2, 3)
        self.assertEqual(b.to_list(), IDENTITY)

    def test_from_array_verbatim(self):
        values = [float(i) for i in range(16)]
        m = TransformMatrix.from_array(values)
        self.assertEqual(m.to_list(), values)

        # tuple and ndarray inputs behave the same
        self.assertEqual(TransformMatrix.from_array(tuple(values)), m)
        self.assertEqual(TransformMatrix.from_array(np.arange(16)), m)

    def test_from_array_copies_input(self):
        values = [float(i) for i in range(16)]
        m = TransformMatrix.from_array(values)
        values[0] = 100.0
        self.assertEqual(m.to_list()[0], 0.0)

        arr = np.arange(16, dtype=np.float64)
        m = TransformMatrix.from_array(arr)
        arr[5] = -1.0
        self.assertEqual(m.to_array()[5], 5.0)

    def test_from_array_accepts_non_rigid(self):
        # a projective bottom row and a scaled block are stored as given
        values = [2.0, 0.0, 0.0, 0.5,
                  0.0, 3.0, 0.0, 0.0,
                  0.0, 0.0, 4.0, 1.0,
                  1.0, 2.0, 3.0, 0.0]
        self.assertEqual(TransformMatrix.from_array(values).to_list(), values)

    def test_set_from_array_wrong_length(self):
        m = TransformMatrix().set_position(1, 2, 3)
        before = m.to_list()
        for bad in ([0.0] * 15, [0.0] * 17, [], np.eye(4)):
            with self.assertRaises(ValueError):
                m.set_from_array(bad)
            self.assertEqual(m.to_list(), before)
        with self.assertRaises(ValueError):
            TransformMatrix.from_array([1.0] * 9)

    def test_from_array_accepts_iterators(self):
        values = [float(i) for i in range(16)]
        self.assertEqual(
            TransformMatrix.from_array(float(i) for i in range(16)).to_list(), values)
        m = TransformMatrix()
        m.set_from_array(iter(values))
        self.assertEqual(m.to_list(), values)
        self.assertEqual(TransformMatrix(iter(values)).to_list(), values)

    def test_short_iterator_raises(self):
        m = TransformMatrix()
        with self.assertRaises(ValueError):
            m.set_from_array(float(i) for i in range(15))
        self.assertEqual(m, TransformMatrix.identity())

    def test_set_from_array_returns_self(self):
        m = TransformMatrix()
        self.assertIs(m.set_from_array(range(16)), m)

    def test_set_position(self):
        m = TransformMatrix.from_euler(10, 20, 30)
        before = m.to_array()
        out = m.set_position(4, -5, 6)
        self.assertIs(out, m)

        after = m.to_array()
        np.testing.assert_array_equal(after[12:15], [4, -5, 6])
        # everything else untouched
        mask = np.ones(16, dtype=bool)
        mask[12:15] = False
        np.testing.assert_array_equal(after[mask], before[mask])

    def test_from_translation(self):
        m = TransformMatrix.from_translation(1, 2, 3)
        expected = list(IDENTITY)
        expected[12:15] = [1.0, 2.0, 3.0]
        self.assertEqual(m.to_list(), expected)

    def test_to_array_is_a_copy(self):
        m = TransformMatrix()
        arr = m.to_array()
        arr[:] = 7.0
        self.assertEqual(m.to_list(), IDENTITY)

        elements = m.elements
        elements[0] = 9.0
        self.assertEqual(m.elements[0], 1.0)

    def test_to_3x3_identity(self):
        np.testing.assert_array_equal(
            TransformMatrix().to_3x3(), [1, 0, 0, 0, 1, 0, 0, 0, 1])

    def test_to_3x3_layout(self):
        values = np.arange(16, dtype=np.float64)
        values[2] = 0.5
        values[10] = 0.8
        m = TransformMatrix.from_array(values)
        out = m.to_3x3()

        np.testing.assert_array_equal(out, [0, 1, 0.5, 4, 5, 6, 0.5, 6, 0.8])
        # slot 6 repeats element 2 instead of holding element 8
        self.assertEqual(out[6], m.elements[2])
        self.assertNotEqual(out[6], m.elements[8])
        self.assertEqual(out[8], m.elements[10])

    def test_to_3x3_is_a_copy(self):
        m = TransformMatrix()
        out = m.to_3x3()
        out[0] = 5.0
        self.assertEqual(m.elements[0], 1.0)


if __name__ == "__main__":
    unittest.main()
