"""
Couche services (cas d'usage).

Les services orchestrent la logique du domaine :
- statistics, rating : notation des artefacts et des scenes
- rating_updater : ecriture des notes dans le catalogue
- space_filler : selection de scenes favorites sous contrainte d'espace
- renamer, organizer, nfo_builder, library_organizer : reorganisation de la bibliotheque
- studio_analyzer : analyse de l'engagement par studio

Les services dependent des ports (core/ports), jamais des adaptateurs.
"""
