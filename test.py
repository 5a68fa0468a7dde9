import doctest

import diffxml
from diffxml import DiffConfig
from diffxml import config, delta, locator, parser, position, serializer, textrun

for module in (diffxml, config, delta, locator, parser, position, serializer,
               textrun):
    doctest.testmod(module, verbose=True)


# Additional regression checks (basic asserts)
def _assert_converges(old, new, config=None):
    out = diffxml.patch_xml(old, diffxml.diff_xml(old, new, config))
    assert out == new, "Expected %r, got %r" % (new, out)


def run_regressions():
    # Text split by an inserted element
    _assert_converges('<a>text</a>', '<a>te<b/>xt</a>')

    # Swapping text around an element
    _assert_converges('<a>one<b/>two</a>', '<a>two<b/>one</a>')

    # Subtree moved to another parent
    _assert_converges('<a><b><c/></b><d/></a>', '<a><b/><d><c/></d></a>')

    # Document element renamed, attributes changed
    _assert_converges('<a x="1"><b/></a>', '<z x="2"><b/></z>')

    # CDATA kept apart from surrounding text
    _assert_converges('<a>x<![CDATA[y]]>z</a>', '<a>x<![CDATA[y]]><b/>z</a>')

    # Ignored comments never show up in the delta
    out = diffxml.diff_xml('<a><!--x--></a>', '<a><!--y--></a>',
                           DiffConfig(ignore_comments=True))
    assert '<insert' not in out and '<delete' not in out, out


if __name__ == '__main__':
    run_regressions()
    print('Regressions OK')
