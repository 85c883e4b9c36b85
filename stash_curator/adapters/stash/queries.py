"""
Requetes et mutations GraphQL envoyees au serveur Stash.

Les fragments ne selectionnent que les champs utilises par le moteur
de curation.
"""

PERFORMER_FIELDS = """
    id
    name
    gender
    favorite
    o_counter
    scene_count
    image_path
"""

STUDIO_FIELDS = """
    id
    name
    favorite
    o_counter
    scene_count
    parent_studio { id }
"""

TAG_FIELDS = """
    id
    name
    favorite
    o_counter
    scene_count
"""

FIND_SCENES = """
query FindScenes($filter: FindFilterType, $scene_filter: SceneFilterType) {
  findScenes(filter: $filter, scene_filter: $scene_filter) {
    count
    scenes {
      id
      title
      date
      details
      o_counter
      rating100
      organized
      studio { id name favorite parent_studio { id } }
      tags { id name favorite }
      performers { id name gender favorite o_counter image_path }
      files { path size width height }
      paths { screenshot }
    }
  }
}
"""

FIND_PERFORMERS = f"""
query FindPerformers($filter: FindFilterType, $performer_filter: PerformerFilterType) {{
  findPerformers(filter: $filter, performer_filter: $performer_filter) {{
    count
    performers {{ {PERFORMER_FIELDS} }}
  }}
}}
"""

FIND_STUDIOS = f"""
query FindStudios($filter: FindFilterType, $studio_filter: StudioFilterType) {{
  findStudios(filter: $filter, studio_filter: $studio_filter) {{
    count
    studios {{ {STUDIO_FIELDS} }}
  }}
}}
"""

FIND_TAGS = f"""
query FindTags($filter: FindFilterType, $tag_filter: TagFilterType) {{
  findTags(filter: $filter, tag_filter: $tag_filter) {{
    count
    tags {{ {TAG_FIELDS} }}
  }}
}}
"""

SCENE_UPDATE = """
mutation SceneUpdate($input: SceneUpdateInput!) {
  sceneUpdate(input: $input) { id }
}
"""

PERFORMER_UPDATE = """
mutation PerformerUpdate($input: PerformerUpdateInput!) {
  performerUpdate(input: $input) { id }
}
"""

STUDIO_UPDATE = """
mutation StudioUpdate($input: StudioUpdateInput!) {
  studioUpdate(input: $input) { id }
}
"""

METADATA_SCAN = """
mutation MetadataScan($input: ScanMetadataInput!) {
  metadataScan(input: $input)
}
"""
