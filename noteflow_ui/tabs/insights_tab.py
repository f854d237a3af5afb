import streamlit as st

from noteflow_ui.metrics import completion_by_category, open_tasks_by_due_bucket, summary, tasks_frame
from noteflow_ui.visualizations import category_completion_chart, completion_donut, due_bucket_chart


def render_insights_tab(ctx):
    st.markdown("<div class='section-title'>Insights</div>", unsafe_allow_html=True)
    frame = tasks_frame(ctx["store"].tasks)
    if frame.empty:
        st.caption("Add a few tasks to see your progress here.")
        return

    stats = summary(frame)
    cols = st.columns(4)
    cols[0].metric("Tasks", stats["total"])
    cols[1].metric("Completed", stats["completed"], f"{stats['rate']}%")
    cols[2].metric("Open priority", stats["priority_open"])
    cols[3].metric("Overdue", stats["overdue"])

    left, right = st.columns([2, 1])
    with left:
        st.plotly_chart(category_completion_chart(completion_by_category(frame), ctx.mood), use_container_width=True)
    with right:
        st.plotly_chart(completion_donut(stats["completed"], stats["total"], ctx.mood), use_container_width=True)
    st.plotly_chart(due_bucket_chart(open_tasks_by_due_bucket(frame)), use_container_width=True)
    if stats["sub_task_rate"]:
        st.caption(f"Sub-task completion: {stats['sub_task_rate']}%")
