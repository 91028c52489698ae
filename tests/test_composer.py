"""Test template substitution and video composition"""

import pytest

from autoyt.core.config import VideoFormat
from autoyt.core.database import Collections
from autoyt.core.exceptions import (
    CollectionsIntegrityError,
    NoBufferedArtworkError,
    TemplateError,
)
from autoyt.core.models import Artist, Artwork, ItemState, Track
from autoyt.schedule.composer import VideoBuilder, preview_videos, substitute


class TestSubstitute:
    """Test %(key) placeholder substitution"""

    @pytest.mark.parametrize("template,values,expected", [
        ("%(abc) - %(d)", {"abc": "ABC", "d": "D"}, "ABC - D"),
        ("%%(abc)%%(d)%", {"abc": "ABC", "d": "D"}, "%ABC%D%"),
        ("%(ab)c)", {"ab": "ABC"}, "ABCc)"),
        ("%()", {"": "A"}, "A"),
        ("%(k)", {"k": "v"}, "v"),
        ("100% (sure)", {}, "100% (sure)"),
        ("", {}, ""),
    ])
    def test_substitute(self, template, values, expected):
        assert substitute(template, values) == expected

    def test_missing_key(self):
        """Unknown keys report the key and the whole template"""
        with pytest.raises(TemplateError) as exc_info:
            substitute("%(by) - %(name)", {"by": "A"})

        assert exc_info.value.key == "name"
        assert exc_info.value.template == "%(by) - %(name)"
        assert str(exc_info.value) == "invalid key 'name' in '%(by) - %(name)'"

    def test_unterminated_placeholder(self):
        with pytest.raises(TemplateError) as exc_info:
            substitute("%(by - x", {"by": "A"})

        assert exc_info.value.template == "%(by - x"


class TestVideoBuilder:
    """Test video title, description and path"""

    @pytest.fixture
    def collections(self):
        return Collections(artists=[
            Artist(name="TrackArtist", links=["track.com/artist"]),
            Artist(name="ArtworkArtist", links=["artwork.com/artist"]),
        ])

    @pytest.fixture
    def builder(self):
        track = Track(title="Name", by="TrackArtist", artists=["TrackArtist"], path="/music/t.mp3")
        artwork = Artwork(artist="ArtworkArtist", path="/art/a.png")
        return VideoBuilder(track, artwork, VideoFormat(), ".mp4")

    def test_title(self, builder):
        assert builder.title() == "TrackArtist - Name"

    def test_description(self, builder, collections):
        expected = (
            "TrackArtist - Name\n"
            "\n"
            "TrackArtist\n"
            "- track.com/artist\n"
            "\n"
            "Artwork by ArtworkArtist\n"
            "- artwork.com/artist\n"
        )
        assert builder.description(collections) == expected

    def test_description_with_track_text_and_footer(self, builder, collections):
        builder.track.description = "Recorded live."
        builder.video_format = VideoFormat(footer="Subscribe!")

        description = builder.description(collections)

        assert description.startswith("TrackArtist - Name\n\nRecorded live.\n\nTrackArtist\n")
        assert description.endswith("- artwork.com/artist\n\nSubscribe!")

    def test_description_without_header(self, builder, collections):
        builder.video_format = VideoFormat(header="")

        assert builder.description(collections).startswith("TrackArtist\n- track.com/artist\n\n")

    def test_single_artist_scenario(self):
        """Track "A - Song" with artist A linking to a.com"""
        collections = Collections(artists=[Artist(name="A", links=["a.com"]), Artist(name="P")])
        track = Track(title="Song", by="A", artists=["A"], path="/music/A - Song.mp3")
        artwork = Artwork(artist="P", path="/art/p.png")

        description = VideoBuilder(track, artwork, VideoFormat(), ".mp4").description(collections)

        assert description == "A - Song\n\nA\n- a.com\n\nArtwork by P\n"

    def test_artist_lookup_ignores_case(self, builder):
        collections = Collections(artists=[
            Artist(name="trackartist", links=["x.com"]),
            Artist(name="ARTWORKARTIST"),
        ])

        assert "TrackArtist\n- x.com\n\n" in builder.description(collections)

    def test_unknown_artist_is_integrity_error(self, builder):
        collections = Collections(artists=[Artist(name="ArtworkArtist")])

        with pytest.raises(CollectionsIntegrityError):
            builder.description(collections)

    def test_build_without_destination(self, builder, collections):
        video = builder.build(collections, None)

        assert video.path == "TrackArtist - Name.mp4"
        assert video.state == ItemState.BUFFERED
        assert video.publish_at is None
        assert video.upload_id is None
        assert video.audio == "/music/t.mp3"
        assert video.image == "/art/a.png"

    def test_build_with_destination(self, builder, collections, temp_dir):
        builder.track.title = "What?"

        video = builder.build(collections, temp_dir)

        assert (temp_dir / "schedule").is_dir()
        assert video.path == str(temp_dir / "schedule" / "TrackArtist - What_.mp4")
        assert video.title == "TrackArtist - What?"


class TestPreviewVideos:
    """Test description preview of the next videos"""

    def test_preview_first_pair(self, sample_collections):
        videos = preview_videos(sample_collections, VideoFormat(), ".mp4")

        assert [v.title for v in videos] == ["B - Second"]

    def test_preview_all(self, sample_collections):
        videos = preview_videos(sample_collections, VideoFormat(), ".mp4", show_all=True)

        assert [v.title for v in videos] == ["B - Second", "A - First"]

    def test_preview_range_is_clamped(self, sample_collections):
        videos = preview_videos(sample_collections, VideoFormat(), ".mp4", n=0, count=10)

        assert len(videos) == 2

    def test_preview_beyond_pairs(self, sample_collections):
        assert preview_videos(sample_collections, VideoFormat(), ".mp4", n=3) == []

    def test_preview_sets_description(self, sample_collections):
        videos = preview_videos(
            sample_collections, VideoFormat(), ".mp4", n=2, description_lines=["line 1", "line 2"]
        )

        assert sample_collections.tracks[0].description == "line 1\nline 2"
        assert "line 1\nline 2\n\n" in videos[0].description

    def test_preview_needs_artwork(self, sample_collections):
        for artwork in sample_collections.artwork:
            artwork.state = ItemState.SCHEDULED

        with pytest.raises(NoBufferedArtworkError):
            preview_videos(sample_collections, VideoFormat(), ".mp4")
