import io
import os.path
import shutil
import tempfile
import unittest
from unittest import mock

from pyproperties import (
    PropertyFileNotFoundError,
    PropertyFileParseError,
    PropertyFileStoreError,
    PropertyMap,
    PropertySection,
)
from pyproperties.ini import parser
from pyproperties.ini.parser import (
    PropertiesParser,
    check_key,
    check_section_name,
    escape,
    unescape,
)

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def parse(text, sections=False):
    return PropertiesParser.readstream(io.StringIO(text), sections)


class EscapeTest(unittest.TestCase):

    def testEscape(self):
        self.assertEqual('plain', escape('plain'))
        self.assertEqual('a\\"b', escape('a"b'))
        self.assertEqual("a\\'b", escape("a'b"))
        self.assertEqual('a\\\\b', escape('a\\b'))
        self.assertEqual('a\\0b', escape('a\0b'))

    def testUnescape(self):
        self.assertEqual('a"b', unescape('a\\"b'))
        self.assertEqual("a'b", unescape("a\\'b"))
        self.assertEqual('a\\b', unescape('a\\\\b'))
        self.assertEqual('a\0b', unescape('a\\0b'))

    def testUnescapeKeepsOtherBackslashes(self):
        self.assertEqual('C:\\Windows', unescape('C:\\Windows'))
        self.assertEqual('trailing\\', unescape('trailing\\'))

    def testUnescapeLineBreaksOnlyWhenQuoted(self):
        self.assertEqual('a\\nb', unescape('a\\nb'))
        self.assertEqual('a\nb\rc', unescape('a\\nb\\rc', True))
        self.assertEqual('a\\nb', unescape('a\\\\nb', True))


class CheckTest(unittest.TestCase):

    def testCheckKey(self):
        self.assertIsNone(check_key('property.key.01'))
        self.assertIsNone(check_key('with space'))
        for key in ('', ' a', 'a ', ';a', '#a', '[a', 'a=b', 'a\rb', 'a!b'):
            self.assertIsNotNone(check_key(key), repr(key))

    def testCheckSectionName(self):
        self.assertIsNone(check_section_name('my section'))
        for name in ('', ' a', 'a]', 'a\nb'):
            self.assertIsNotNone(check_section_name(name), repr(name))


class ReadStreamTest(unittest.TestCase):

    def testFlat(self):
        ret = parse('a = 1\nb=2\n  c  =  three words  \n')
        self.assertEqual({'a': '1', 'b': '2', 'c': 'three words'}, ret.to_dict())

    def testCommentsAndBlankLines(self):
        ret = parse('; comment\n# comment\n\n   \na = 1 ; inline\n')
        self.assertEqual({'a': '1'}, ret.to_dict())

    def testValueWithEquals(self):
        self.assertEqual('x=y', parse('a = x=y')['a'])

    def testEmptyValue(self):
        self.assertEqual('', parse('a =\n')['a'])

    def testQuotedValues(self):
        ret = parse(
            'dq = "a ; b" ; comment\n'
            'sq = \'C:\\new\\path ; x\'\n'
            'esc = "say \\"hi\\""\n')
        self.assertEqual('a ; b', ret['dq'])
        self.assertEqual('C:\\new\\path ; x', ret['sq'])
        self.assertEqual('say "hi"', ret['esc'])

    def testLaterKeyOverwrites(self):
        self.assertEqual('2', parse('a = 1\na = 2\n')['a'])

    def testSections(self):
        ret = parse('top = 1\n[s1]\na = 1\n[s2] ; comment\na = 2\n', True)
        self.assertEqual('1', ret['top'])
        self.assertIsInstance(ret['s1'], PropertySection)
        self.assertEqual('s1', ret['s1'].name)
        self.assertEqual({'a': '2'}, ret['s2'].to_dict())

    def testReopenedSectionMerges(self):
        ret = parse('[s]\na = 1\n[t]\nx = 0\n[s]\nb = 2\n', True)
        self.assertEqual(['s', 't'], list(ret))
        self.assertEqual({'a': '1', 'b': '2'}, ret['s'].to_dict())

    def testHeadersFlattenWithoutSections(self):
        ret = parse('[s1]\na = 1\n[s2]\na = 2\nb = 3\n')
        self.assertEqual({'a': '2', 'b': '3'}, ret.to_dict())

    def assertParseError(self, text, sections=False, lineno=None):
        with self.assertRaises(PropertyFileParseError) as ctx:
            parse(text, sections)
        if lineno is not None:
            self.assertEqual(lineno, ctx.exception.lineno)
        return ctx.exception

    def testMissingEquals(self):
        self.assertParseError('a = 1\njust words\n', lineno=2)

    def testEmptyKey(self):
        self.assertParseError(' = value\n', lineno=1)

    def testReservedKeyCharacters(self):
        for c in '?{}|&~![()^"':
            self.assertParseError(f'a{c}b = 1\n', lineno=1)

    def testBadHeaders(self):
        self.assertParseError('[unterminated\na = 1\n', True, 1)
        self.assertParseError('[]\na = 1\n', True, 1)
        self.assertParseError('[s] junk\na = 1\n', True, 1)
        # still checked when not reading sections
        self.assertParseError('a = 1\n[unterminated\n', False, 2)

    def testUnterminatedQuote(self):
        self.assertParseError('a = "open\n', lineno=1)
        self.assertParseError("a = 'open\n", lineno=1)
        self.assertParseError('a = "escaped end\\"\n', lineno=1)

    def testJunkAfterQuote(self):
        self.assertParseError('a = "x" y\n', lineno=1)

    def testKeySectionClash(self):
        self.assertParseError('s = 1\n[s]\na = 1\n', True, 2)
        # no clash when headers are not read as sections
        self.assertEqual(
            {'s': '1', 'a': '1'}, parse('s = 1\n[s]\na = 1\n').to_dict())

    def testNoProperties(self):
        err = self.assertParseError('; only a comment\n\n')
        self.assertIsNone(err.lineno)

    def testErrorMessage(self):
        err = self.assertParseError('a = 1\nbroken\n')
        self.assertIn('<stream>:2', str(err))


class WriteStreamTest(unittest.TestCase):

    def testScalarsBeforeSections(self):
        items = PropertyMap()
        items['s'] = {'a': '1'}
        items['top'] = 'x'
        buf = io.StringIO()
        PropertiesParser.writestream(buf, items, newline='\n')
        self.assertEqual('top = x\n[s]\na = 1\n', buf.getvalue())

    def testQuotesWhenNeeded(self):
        items = PropertyMap({'a': 'x;y', 'b': ' pad', 'c': 'q"q'})
        buf = io.StringIO()
        PropertiesParser.writestream(buf, items, newline='\n')
        self.assertEqual(
            'a = "x;y"\nb = " pad"\nc = q\\"q\n', buf.getvalue())

    def testLineBreaksQuoted(self):
        buf = io.StringIO()
        PropertiesParser.writestream(
            buf, PropertyMap({'a': 'x\ny', 'b': 'x\r\ny'}), newline='\n')
        self.assertEqual('a = "x\\ny"\nb = "x\\r\\ny"\n', buf.getvalue())
        buf.seek(0)
        self.assertEqual(
            {'a': 'x\ny', 'b': 'x\r\ny'},
            PropertiesParser.readstream(buf).to_dict())

    def testUnreadableKey(self):
        with self.assertRaises(PropertyFileStoreError):
            PropertiesParser.writestream(
                io.StringIO(), PropertyMap({'s': {'a=b': '1'}}))

    def testPairing(self):
        buf = io.StringIO()
        PropertiesParser.writestream(
            buf, PropertyMap({'a': '1'}), pairing='=', newline='\n')
        self.assertEqual('a=1\n', buf.getvalue())


class ResolveTest(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.first = os.path.join(self.tmpdir, 'first')
        self.second = os.path.join(self.tmpdir, 'second')
        for d in (self.first, self.second):
            os.makedirs(d)
            with open(os.path.join(d, 'both.properties'), 'w') as f:
                f.write('a = 1\n')
        with open(os.path.join(self.second, 'only.properties'), 'w') as f:
            f.write('a = 1\n')

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def testFirstMatchWins(self):
        found = parser.resolve('both.properties', [self.first, self.second])
        self.assertEqual(os.path.join(self.first, 'both.properties'), found)

    def testLaterDirectory(self):
        found = parser.resolve('only.properties', [self.first, self.second])
        self.assertEqual(os.path.join(self.second, 'only.properties'), found)

    def testNotFound(self):
        self.assertIsNone(parser.resolve('none.properties', [self.first]))

    def testAbsolute(self):
        path = os.path.join(self.first, 'both.properties')
        self.assertEqual(path, parser.resolve(path, [self.second]))
        self.assertIsNone(parser.resolve(
            os.path.join(self.first, 'only.properties'), [self.second]))

    def testDirectoryIsNotAFile(self):
        self.assertIsNone(parser.resolve('second', [self.tmpdir]))

    def testGlobalIncludePath(self):
        old = parser.set_include_path([self.second])
        try:
            self.assertEqual([self.second], parser.get_include_path())
            self.assertEqual(
                os.path.join(self.second, 'only.properties'),
                parser.resolve('only.properties'))
        finally:
            parser.set_include_path(old)
        self.assertEqual(old, parser.get_include_path())


class ReadWriteTest(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def testReadFallsBackToDetectedEncoding(self):
        path = os.path.join(self.tmpdir, 'latin.properties')
        with open(path, 'wb') as f:
            f.write('name = K\xe4sek\xfcchen und Spa\xdf\n'.encode('latin-1'))
        ret = PropertiesParser(path).read()
        self.assertIsInstance(ret['name'], str)
        self.assertTrue(ret['name'].startswith('K'))

    def testReadExplicitEncoding(self):
        path = os.path.join(self.tmpdir, 'latin.properties')
        with open(path, 'wb') as f:
            f.write('name = K\xe4se\n'.encode('latin-1'))
        self.assertEqual(
            'K\xe4se', PropertiesParser(path, 'latin-1').read()['name'])

    def testReadSourceInParseError(self):
        path = os.path.join(self.tmpdir, 'bad.properties')
        with open(path, 'w') as f:
            f.write('oops\n')
        with self.assertRaises(PropertyFileParseError) as ctx:
            PropertiesParser(path).read()
        self.assertEqual(path, ctx.exception.source)

    def testReadStripsByteOrderMark(self):
        path = os.path.join(self.tmpdir, 'bom.properties')
        with open(path, 'wb') as f:
            f.write(b'\xef\xbb\xbfk = v\n')
        self.assertEqual({'k': 'v'}, PropertiesParser(path).read().to_dict())

    def testReadNotFound(self):
        with self.assertRaises(PropertyFileNotFoundError):
            PropertiesParser(os.path.join(self.tmpdir, 'none')).read()

    def testWriteFailureClosesFile(self):
        fp = mock.MagicMock()
        fp.write.side_effect = OSError('disk full')
        with mock.patch.object(parser, 'open', return_value=fp, create=True):
            with self.assertRaises(PropertyFileStoreError) as ctx:
                PropertiesParser('x.properties').write(
                    PropertyMap({'a': '1'}))
        fp.close.assert_called_once_with()
        self.assertIn("Can't write", str(ctx.exception))

    def testCloseFailure(self):
        fp = mock.MagicMock()
        fp.close.side_effect = OSError('flush failed')
        with mock.patch.object(parser, 'open', return_value=fp, create=True):
            with self.assertRaises(PropertyFileStoreError) as ctx:
                PropertiesParser('x.properties').write(
                    PropertyMap({'a': '1'}))
        self.assertIn('closing', str(ctx.exception))

    def testOpenFailure(self):
        target = os.path.join(self.tmpdir, 'missing', 'x.properties')
        with self.assertRaises(PropertyFileStoreError) as ctx:
            PropertiesParser(target).write(PropertyMap({'a': '1'}))
        self.assertIn('for writing', str(ctx.exception))
