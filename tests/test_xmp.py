"""Tests for XMP packet flattening."""

from infrastructure.xmp import parse_xmp_properties

PACKET_HEAD = (
    '<x:xmpmeta xmlns:x="adobe:ns:meta/">'
    '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
)
PACKET_TAIL = "</rdf:RDF></x:xmpmeta>"


def packet(body: str) -> str:
    return PACKET_HEAD + body + PACKET_TAIL


def test_attribute_form_properties():
    props = parse_xmp_properties(
        packet(
            '<rdf:Description rdf:about="" '
            'xmlns:xmp="http://ns.adobe.com/xap/1.0/" '
            'xmlns:photoshop="http://ns.adobe.com/photoshop/1.0/" '
            'xmp:CreateDate="2020-01-01T10:00:00" '
            'photoshop:DateCreated="2019-12-31"/>'
        )
    )
    assert props["xmp:CreateDate"] == "2020-01-01T10:00:00"
    assert props["photoshop:DateCreated"] == "2019-12-31"
    assert not any(key.endswith("about") for key in props)


def test_element_form_and_language_alternative():
    props = parse_xmp_properties(
        packet(
            '<rdf:Description rdf:about="" xmlns:dc="http://purl.org/dc/elements/1.1/" '
            'xmlns:xmp="http://ns.adobe.com/xap/1.0/">'
            "<xmp:ModifyDate>2021-05-05T10:00:00</xmp:ModifyDate>"
            "<dc:description><rdf:Alt>"
            '<rdf:li xml:lang="x-default">Beach</rdf:li>'
            '<rdf:li xml:lang="fr">Plage</rdf:li>'
            "</rdf:Alt></dc:description>"
            "<dc:subject><rdf:Bag><rdf:li>sea</rdf:li><rdf:li>sand</rdf:li></rdf:Bag>"
            "</dc:subject>"
            "</rdf:Description>"
        )
    )
    assert props["xmp:ModifyDate"] == "2021-05-05T10:00:00"
    assert props["dc:description[1]"] == "Beach"
    assert props["dc:description[2]"] == "Plage"
    assert props["dc:subject[1]"] == "sea"
    assert props["dc:subject[2]"] == "sand"


def test_struct_fields_use_slash_paths():
    props = parse_xmp_properties(
        packet(
            '<rdf:Description rdf:about="" '
            'xmlns:Iptc4xmpExt="http://iptc.org/std/Iptc4xmpExt/2008-02-29/">'
            "<Iptc4xmpExt:ArtworkOrObject><rdf:Bag><rdf:li rdf:parseType=\"Resource\">"
            "<Iptc4xmpExt:AOTitle>Mona Lisa</Iptc4xmpExt:AOTitle>"
            "</rdf:li></rdf:Bag></Iptc4xmpExt:ArtworkOrObject>"
            "<Iptc4xmpExt:ArtworkContentDescription>A portrait"
            "</Iptc4xmpExt:ArtworkContentDescription>"
            "</rdf:Description>"
        )
    )
    assert props["Iptc4xmpExt:ArtworkOrObject[1]/Iptc4xmpExt:AOTitle"] == "Mona Lisa"
    assert props["Iptc4xmpExt:ArtworkContentDescription"] == "A portrait"


def test_declared_prefix_wins_over_customary_one():
    props = parse_xmp_properties(
        packet(
            '<rdf:Description rdf:about="" xmlns:xap="http://ns.adobe.com/xap/1.0/" '
            'xap:CreateDate="2020-01-01"/>'
        )
    )
    assert props == {"xap:CreateDate": "2020-01-01"}


def test_several_descriptions_are_merged():
    props = parse_xmp_properties(
        packet(
            '<rdf:Description rdf:about="" xmlns:xmp="http://ns.adobe.com/xap/1.0/" '
            'xmp:CreateDate="2020-01-01"/>'
            '<rdf:Description rdf:about="" xmlns:photoshop="http://ns.adobe.com/photoshop/1.0/" '
            'photoshop:DateCreated="2019-12-31"/>'
        )
    )
    assert set(props) == {"xmp:CreateDate", "photoshop:DateCreated"}


def test_packet_wrapper_and_trailing_padding_are_accepted():
    body = packet(
        '<rdf:Description rdf:about="" xmlns:xmp="http://ns.adobe.com/xap/1.0/" '
        'xmp:CreateDate="2020-01-01"/>'
    )
    wrapped = (
        '<?xpacket begin="" id="W5M0MpCehiHzreSzNTczkc9d"?>'
        + body
        + '<?xpacket end="w"?>'
    ).encode("utf-8") + b"\x00\x00  "
    assert parse_xmp_properties(wrapped) == {"xmp:CreateDate": "2020-01-01"}


def test_invalid_packets_are_none():
    assert parse_xmp_properties(b"") is None
    assert parse_xmp_properties(b"<not-closed>") is None
    assert parse_xmp_properties("plain text") is None


def test_packet_without_rdf_is_empty():
    assert parse_xmp_properties("<x:xmpmeta xmlns:x='adobe:ns:meta/'/>") == {}
