"""Tests for the post, comment, subreddit, user and emoji controllers."""

import pytest

from conftest import comment, listing, post
from reddit_client import things
from reddit_client.controllers import (
    Comment,
    Comments,
    CommentSort,
    Emoji,
    Post,
    PostSort,
    Subreddit,
    SubredditPosts,
    User,
)
from reddit_client.exceptions import RedditControllerException


def things_response(*children):
    return {"json": {"errors": [], "data": {"things": list(children)}}}


class TestPost:

    def test_from_thing_unescapes_title(self, dispatch):
        record = things.Post.from_dict({**post("t3_a")["data"], "title": "Q&amp;A thread"})
        controller = Post.from_thing(dispatch, record)
        assert controller.title == "Q&A thread"
        assert controller.fullname == "t3_a"
        assert controller.up_votes == 12
        assert controller.listing is record

    def test_votes(self, dispatch):
        p = Post(dispatch, fullname="t3_a")
        p.upvote()
        p.downvote()
        p.unvote()
        dirs = [call.args[1]["dir"] for call in dispatch.post.call_args_list]
        assert dirs == [1, -1, 0]
        assert all(call.args[0] == "/api/vote" for call in dispatch.post.call_args_list)

    def test_actions_need_fullname(self, dispatch):
        with pytest.raises(RedditControllerException):
            Post(dispatch).hide()
        dispatch.post.assert_not_called()

    @pytest.mark.parametrize(
        "action, path",
        [
            ("hide", "/api/hide"),
            ("unhide", "/api/unhide"),
            ("lock", "/api/lock"),
            ("unlock", "/api/unlock"),
            ("mark_nsfw", "/api/marknsfw"),
            ("unmark_nsfw", "/api/unmarknsfw"),
            ("spoiler", "/api/spoiler"),
            ("unspoiler", "/api/unspoiler"),
            ("delete", "/api/del"),
            ("approve", "/api/approve"),
            ("unsave", "/api/unsave"),
        ],
    )
    def test_simple_actions(self, dispatch, action, path):
        getattr(Post(dispatch, fullname="t3_a"), action)()
        dispatch.post.assert_called_once_with(path, {"id": "t3_a"})

    def test_sticky_and_contest_mode(self, dispatch):
        p = Post(dispatch, fullname="t3_a")
        p.set_subreddit_sticky(num=2)
        p.disable_contest_mode()
        sticky, contest = (call.args[1] for call in dispatch.post.call_args_list)
        assert sticky["num"] == 2 and sticky["state"] is True
        assert contest["state"] is False

    def test_reply_returns_created_comment(self, dispatch):
        dispatch.post.return_value = things_response(comment("t1_new", body="thanks &amp; bye", parent="t3_a"))
        created = Post(dispatch, fullname="t3_a", subreddit="python").reply("thanks & bye")

        dispatch.post.assert_called_once_with(
            "/api/comment", {"api_type": "json", "thing_id": "t3_a", "text": "thanks & bye"}
        )
        assert isinstance(created, Comment)
        assert created.fullname == "t1_new"
        assert created.body == "thanks & bye"

    async def test_reply_async(self, dispatch):
        dispatch.post_async.return_value = things_response(comment("t1_new", parent="t3_a"))
        created = await Post(dispatch, fullname="t3_a").reply_async("hi")
        assert created.parent_fullname == "t3_a"

    async def test_upvote_async(self, dispatch):
        await Post(dispatch, fullname="t3_a").upvote_async()
        dispatch.post_async.assert_awaited_once_with("/api/vote", {"id": "t3_a", "dir": 1})

    def test_about(self, dispatch):
        dispatch.get.return_value = listing(post("t3_a", title="Fresh"))
        loaded = Post(dispatch, fullname="t3_a", subreddit="python").about()
        assert loaded.title == "Fresh"
        assert dispatch.get.call_args.args == ("/r/python/api/info", {"id": "t3_a"})

    def test_about_mismatch_raises(self, dispatch):
        dispatch.get.return_value = listing(post("t3_other"))
        with pytest.raises(RedditControllerException, match="Unable to retrieve post data."):
            Post(dispatch, fullname="t3_a").about()

    def test_comments_controller_is_lazy_and_scoped(self, dispatch):
        p = Post(dispatch, fullname="t3_abc", subreddit="python")
        assert p.comments is p.comments
        assert p.comments.post_id == "abc"
        assert p.comments.monitor_key(CommentSort.NEW) == "CommentsabcNew"

    def test_more_children(self, dispatch):
        dispatch.get.return_value = things_response(comment("t1_x"), comment("t1_y"))
        expanded = Post(dispatch, fullname="t3_a").more_children(["x", "y"])
        assert [c.fullname for c in expanded] == ["t1_x", "t1_y"]
        params = dispatch.get.call_args.args[1]
        assert params["children"] == "x,y"
        assert params["link_id"] == "t3_a"

    def test_report(self, dispatch):
        Post(dispatch, fullname="t3_a", subreddit="python").report("spam", custom_text="bot")
        path, data = dispatch.post.call_args.args
        assert path == "/api/report"
        assert data["reason"] == "spam"
        assert data["custom_text"] == "bot"
        assert data["sr_name"] == "python"


class TestComment:

    def test_submit_requires_parent(self, dispatch):
        with pytest.raises(RedditControllerException):
            Comment(dispatch, body="orphan").submit()

    def test_reply_chain(self, dispatch):
        dispatch.post.return_value = things_response(comment("t1_child", parent="t1_parent"))
        child = Comment(dispatch, fullname="t1_parent").reply("me too")
        assert child.parent_fullname == "t1_parent"
        assert dispatch.post.call_args.args[1]["thing_id"] == "t1_parent"

    def test_edit(self, dispatch):
        dispatch.post.return_value = things_response(comment("t1_a", body="fixed"))
        c = Comment(dispatch, fullname="t1_a", body="typo")
        edited = c.edit("fixed")
        assert c.body == "fixed"
        assert edited.body == "fixed"
        assert dispatch.post.call_args.args[0] == "/api/editusertext"

    def test_from_thing_keeps_replies(self, dispatch):
        record = things.Comment.from_dict(comment("t1_a")["data"])
        record.replies = [things.Comment.from_dict(comment("t1_b", parent="t1_a")["data"])]
        c = Comment.from_thing(dispatch, record)
        assert [r.fullname for r in c.replies] == ["t1_b"]

    def test_about_not_found(self, dispatch):
        dispatch.get.return_value = listing()
        with pytest.raises(RedditControllerException, match="Unable to retrieve comment data."):
            Comment(dispatch, fullname="t1_a").about()


class TestComments:

    def payload(self, *children):
        return [listing(post("t3_abc")), listing(*children)]

    def test_get_comments_flattens_and_records_more(self, dispatch):
        more = {"kind": "more", "data": {"children": ["zz"]}}
        dispatch.get.return_value = self.payload(comment("t1_a", replies=listing(comment("t1_b"))), more)
        comments = Comments(dispatch, "t3_abc", subreddit="python")

        result = comments.get_comments("new", limit=10)

        assert [c.fullname for c in result] == ["t1_a", "t1_b"]
        assert comments.more_containers[CommentSort.NEW][0].data.children == ["zz"]
        path, params = dispatch.get.call_args.args
        assert path == "/r/python/comments/abc"
        assert params["sort"] == "new"
        assert params["limit"] == 10

    def test_unexpected_payload_is_empty(self, dispatch):
        dispatch.get.return_value = {"error": 404}
        assert Comments(dispatch, "abc").get_comments() == []

    def test_monitor_new(self, dispatch):
        dispatch.get.return_value = self.payload()
        comments = Comments(dispatch, "abc")
        assert comments.monitor_new() is True
        assert dispatch.registry.keys() == ["CommentsabcNew"]
        comments.stop_monitoring("new")

    def test_same_post_shares_monitor_key(self, dispatch):
        dispatch.get.return_value = self.payload()
        first, second = Comments(dispatch, "abc"), Comments(dispatch, "t3_abc")
        assert first.monitor_new() is True
        assert second.monitor_new() is False
        first.stop_monitoring("new")


class TestSubreddit:

    def test_posts_feed(self, dispatch, clock):
        dispatch.get.return_value = listing(post("t3_1"), post("t3_2"))
        posts = SubredditPosts(dispatch, "python", clock=clock)
        assert [p.fullname for p in posts.hot] == ["t3_1", "t3_2"]
        assert dispatch.get.call_args.args[0] == "/r/python/hot"
        assert posts.monitor_key(PostSort.HOT) == "SubredditPostspythonHot"

    def test_get_posts_params(self, dispatch):
        dispatch.get.return_value = listing()
        SubredditPosts(dispatch, "python").get_posts("top", limit=500, t="week")
        params = dispatch.get.call_args.args[1]
        assert params["limit"] == 100
        assert params["t"] == "week"

    def test_about(self, dispatch):
        dispatch.get.return_value = {"kind": "t5", "data": {"display_name": "python", "subscribers": 5}}
        about = Subreddit(dispatch, "r/python").about()
        assert about.display_name == "python"
        assert dispatch.get.call_args.args[0] == "/r/python/about"

    def test_search_restricts_to_subreddit(self, dispatch):
        dispatch.get.return_value = listing(post("t3_1"))
        results = Subreddit(dispatch, "python").search("asyncio", limit=5)
        assert [p.fullname for p in results] == ["t3_1"]
        path, params = dispatch.get.call_args.args
        assert path == "/r/python/search"
        assert params["q"] == "asyncio"
        assert params["restrict_sr"] is True

    def test_autocomplete(self, dispatch):
        dispatch.get.return_value = {"subreddits": [{"name": "python", "numSubscribers": 9, "keyColor": "#fff"}]}
        result = Subreddit(dispatch, "python").autocomplete("pyt")
        assert result.subreddits[0].num_subscribers == 9
        assert result.subreddits[0].key_color == "#fff"

    def test_submit_self_post(self, dispatch):
        dispatch.post.return_value = {"json": {"errors": [], "data": {"name": "t3_new"}}}
        created = Subreddit(dispatch, "python").submit_self_post("Title", "Body")
        assert created == {"name": "t3_new"}
        data = dispatch.post.call_args.args[1]
        assert data["kind"] == "self"
        assert data["sr"] == "python"

    def test_emoji_is_lazy(self, dispatch):
        sub = Subreddit(dispatch, "python")
        assert isinstance(sub.emoji, Emoji)
        assert sub.emoji is sub.emoji


class TestUser:

    def test_about_maps_profile_subreddit(self, dispatch):
        dispatch.get.return_value = {
            "kind": "t2",
            "data": {"id": "xyz", "name": "spez", "link_karma": 3, "subreddit": {"display_name": "u_spez"}},
        }
        user = User(dispatch, "u/spez").about()
        assert user.fullname == "t2_xyz"
        assert user.subreddit.display_name == "u_spez"

    def test_about_failure(self, dispatch):
        dispatch.get.return_value = {}
        with pytest.raises(RedditControllerException):
            User(dispatch, "ghost").about()

    def test_comment_history(self, dispatch):
        dispatch.get.return_value = listing(comment("t1_a"), post("t3_stray"))
        history = User(dispatch, "spez").comment_history(limit=5)
        assert [c.fullname for c in history] == ["t1_a"]
        assert dispatch.get.call_args.args[0] == "/user/spez/comments"


class TestEmoji:

    def test_paths(self, dispatch):
        dispatch.post.return_value = {"status": True}
        emoji = Emoji(dispatch, "python")

        assert emoji.add("snake", "python/abc").status is True
        emoji.delete("snake")
        emoji.all()
        emoji.custom_size(20, 20)

        assert dispatch.post.call_args_list[0].args == (
            "/api/v1/python/emoji.json",
            {"name": "snake", "s3_key": "python/abc"},
        )
        dispatch.delete.assert_called_once_with("/api/v1/python/emoji/snake")
        dispatch.get.assert_called_once_with("/api/v1/python/emojis/all")
        assert dispatch.post.call_args_list[1].args[0] == "/api/v1/python/emoji_custom_size"

    def test_acquire_lease(self, dispatch):
        Emoji(dispatch, "python").acquire_lease("snake.png", "image/png")
        dispatch.post.assert_called_once_with(
            "/api/v1/python/emoji_asset_upload_s3.json", {"filepath": "snake.png", "mimetype": "image/png"}
        )
