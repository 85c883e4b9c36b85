"""
Generation des fichiers NFO (format Kodi/Jellyfin) pour les scenes.

Le fichier NFO accompagne chaque fichier video organise et decrit la
scene : titre, note, date, studio, performers, tags et identifiant
stable dans le catalogue.
"""

import math
import re
from typing import Optional
from xml.dom import minidom
from xml.etree import ElementTree as ET

from stash_curator.core.entities import Scene
from stash_curator.utils.constants import NFO_GENRE, NFO_UNIQUE_ID_TYPE, NFO_UNKNOWN_STUDIO


# Caracteres hors du jeu XML 1.0 (controles C0 sauf tabulation et fins de ligne)
_XML_ILLEGAL_CHARS = re.compile(
    "[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def _clean_xml_text(value: str) -> str:
    return _XML_ILLEGAL_CHARS.sub("", value)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _text(parent: ET.Element, tag: str, value: Optional[object]) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = "" if value is None else _clean_xml_text(str(value))
    return element


def _wrap_plot_in_cdata(document: minidom.Document, plot: str) -> None:
    # Une section CDATA ne peut pas contenir "]]>" : le texte echappe suffit alors
    if not plot or "]]>" in plot:
        return
    plot_node = document.getElementsByTagName("plot")[0]
    for child in list(plot_node.childNodes):
        plot_node.removeChild(child)
    plot_node.appendChild(document.createCDATASection(plot))


def build_scene_nfo(scene: Scene) -> str:
    """
    Construit le contenu XML du fichier NFO d'une scene.

    Args:
        scene: Scene a decrire.

    Returns:
        Document XML UTF-8 indente, racine <movie>.
    """
    title = scene.title or ""
    rating100 = scene.rating if scene.rating else None
    rating = _round_half_up(rating100 / 10) if rating100 else None
    release_date = scene.date or ""
    release_year = release_date.split("-")[0] if release_date else ""
    plot = _clean_xml_text(scene.details or "")

    movie = ET.Element("movie")
    _text(movie, "name", title)
    _text(movie, "title", title)
    _text(movie, "originaltitle", title)
    _text(movie, "sorttitle", title)
    _text(movie, "criticrating", rating100)
    _text(movie, "rating", rating)
    _text(movie, "userrating", rating)
    _text(movie, "plot", plot)
    _text(movie, "premiered", release_date)
    _text(movie, "releasedate", release_date)
    _text(movie, "year", release_year)
    _text(movie, "studio", scene.studio.name if scene.studio else NFO_UNKNOWN_STUDIO)

    for order, performer in enumerate(scene.performers):
        actor = ET.SubElement(movie, "actor")
        _text(actor, "name", performer.name)
        _text(actor, "role", performer.name)
        _text(actor, "order", order)

    _text(movie, "genre", NFO_GENRE)
    for tag in scene.tags:
        _text(movie, "tag", tag.name)

    unique_id = _text(movie, "uniqueid", scene.id)
    unique_id.set("type", NFO_UNIQUE_ID_TYPE)

    document = minidom.parseString(ET.tostring(movie, encoding="unicode"))
    _wrap_plot_in_cdata(document, plot)
    return document.toprettyxml(indent="  ", encoding="UTF-8", standalone=True).decode("utf-8")
