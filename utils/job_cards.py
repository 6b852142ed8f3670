from markupsafe import escape


def render_job_card(job):
    """HTML card for one job listing"""
    location = f" — {escape(job['location'])}" if job.get('location') else ''
    link = ''
    if job.get('link'):
        link = f'\n  <a href="{escape(job["link"])}" target="_blank" rel="noopener">Apply</a>'
    return (
        '<div class="job-card">\n'
        f'  <h3>{escape(job.get("title") or "")}</h3>\n'
        f'  <p>{escape(job.get("company") or "")}{location}</p>'
        f'{link}\n'
        '</div>'
    )


def render_job_cards(jobs):
    return '\n'.join(render_job_card(job) for job in jobs)
