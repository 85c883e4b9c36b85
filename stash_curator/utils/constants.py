"""
Constantes globales pour Stash Curator.

Ce module contient les constantes utilisees dans l'application:
- Longueur maximale d'un nom de fichier
- Seuils de libelles de resolution
- Genre et studio par defaut des fichiers NFO
- Noms des fichiers annexes de la copie de scenes
- Extensions video et dossiers sensibles du nettoyage
"""

# Longueur maximale d'un nom de fichier (extension comprise)
MAX_FILENAME_LENGTH = 255

# Seuils de hauteur (pixels) -> libelle, du plus grand au plus petit
RESOLUTION_LABELS = (
    (4320, "8K"),
    (2160, "4K"),
    (1440, "2K"),
    (1080, "1080p"),
    (720, "720p"),
    (480, "480p"),
    (360, "360p"),
    (240, "240p"),
)

# Fichiers NFO
NFO_GENRE = "Adult"
NFO_UNKNOWN_STUDIO = "UNKNOWN"
NFO_UNIQUE_ID_TYPE = "stash"

BYTES_PER_MB = 1024 * 1024

# Copie de scenes : performers cites dans le nom, affiche, metadonnees "People"
MAX_NAMED_PERFORMERS = 5
POSTER_SUFFIX = "-poster.jpg"
PEOPLE_METADATA_DIR = ("generated-metadata", "People")
PEOPLE_IMAGE_NAME = "folder.jpg"

# Nettoyage : un dossier sans aucune de ces extensions est considere vide
VIDEO_EXTENSIONS = frozenset({
    ".mp4",
    ".avi",
    ".mkv",
    ".mov",
    ".wmv",
    ".flv",
    ".webm",
    ".m4v",
    ".mpg",
    ".mpeg",
    ".3gp",
    ".ts",
    ".mts",
    ".m2ts",
    ".vob",
    ".divx",
    ".xvid",
    ".asf",
    ".rm",
    ".rmvb",
    ".ogv",
    ".dv",
    ".f4v",
    ".swf",
})

# Noms de dossiers signales avant suppression
IMPORTANT_FOLDER_NAMES = (
    "system",
    "windows",
    "program files",
    "program files (x86)",
    "users",
    "documents",
    "desktop",
    "downloads",
    "music",
    "pictures",
    "videos",
    "appdata",
    "temp",
    "tmp",
    "etc",
    "var",
    "usr",
    "opt",
    "home",
    "root",
    "bin",
    "sbin",
    "lib",
    "lib64",
    "boot",
    "dev",
    "proc",
    "sys",
)
